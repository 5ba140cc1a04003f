# src/todo_sync/core/errors.py

"""
Error taxonomy shared by the core and the store adapters.

Only ValidationError ever reaches the user. NotFoundError and TransportError are
raised by adapters and swallowed (logged) by the sync core.
"""

from __future__ import annotations


class TodoSyncError(RuntimeError):
    pass


class ValidationError(TodoSyncError):
    """A submitted field fails its required/pattern/length rule."""

    def __init__(self, field: str, rule: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.rule = rule
        self.message = message


class NotFoundError(TodoSyncError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TransportError(TodoSyncError):
    """Network or store failure. Never retried."""
