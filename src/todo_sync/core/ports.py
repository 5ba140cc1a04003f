# src/todo_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The sync core depends on these Protocols instead of concrete stores, so the REST
endpoint, the realtime tree and the in-memory stores are interchangeable.
Adapters raise NotFoundError / TransportError from core.errors.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ..tasks.task_models import NewTask, Task

SnapshotCallback = Callable[[list[Task]], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class TaskWriter(Protocol):
    """Write side shared by both synchronization styles."""

    async def insert(self, task: NewTask) -> str: ...
    async def overwrite(self, task_id: str, task: Task) -> None: ...
    async def remove(self, task_id: str) -> None: ...


@runtime_checkable
class PullTaskSource(TaskWriter, Protocol):
    """Store that must be re-read explicitly after every change."""

    async def fetch_all(self) -> list[Task]: ...
    async def fetch_one(self, task_id: str) -> Task: ...


@runtime_checkable
class PushTaskSource(TaskWriter, Protocol):
    """
    Store that streams the full collection on every change.

    subscribe() must deliver the current value as soon as it is known, and return
    a callable that stops the stream.
    """

    def subscribe(self, on_snapshot: SnapshotCallback) -> Unsubscribe: ...


TaskSource = PullTaskSource | PushTaskSource
