"""Task list manager synchronized with a REST or realtime remote store."""

__version__ = "0.1.0"
