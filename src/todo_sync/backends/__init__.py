"""
Task store adapters.

- rest_source.py: pull-style JSON REST collection
- realtime_source.py: push-style realtime tree with a server-sent-events stream
- memory_source.py: in-process stores for both styles (offline demos, tests)
"""
