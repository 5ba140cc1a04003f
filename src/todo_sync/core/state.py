# src/todo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_sync import TaskSync


@dataclass
class AppState:
    # Settings object (config.Settings or a test stand-in).
    settings: object

    sync: TaskSync
    backend_label: str
