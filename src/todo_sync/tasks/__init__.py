"""
Task subsystem.

Components:
- task_models.py: data structures (Task, NewTask, TaskState) and record decoding
- task_validation.py: field rules for new tasks
- task_view.py: canonical collection, sort/filter projections, list/detail formatting
- task_mutations.py: field transforms + read-modify-write helper
- debounce.py: single-slot debouncer for search input
- task_sync.py: the sync core wiring all of the above to a store adapter
"""
