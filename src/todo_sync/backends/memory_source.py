# src/todo_sync/backends/memory_source.py

from __future__ import annotations

import logging
import uuid

from ..core.errors import NotFoundError
from ..core.ports import SnapshotCallback, Unsubscribe
from ..tasks.task_models import NewTask, Task, TaskRecord, decode_tree

logger = logging.getLogger(__name__)


class _MemoryTree:
    """
    In-process {id: record} tree shared by both offline stores.

    Used for demos when no remote store is configured, and in tests.
    Records are stored without the id (the key is the id), like the realtime tree.
    """

    def __init__(self, records: dict[str, TaskRecord] | None = None) -> None:
        self._tree: dict[str, TaskRecord] = {}
        for key, rec in (records or {}).items():
            self._tree[str(key)] = dict(rec)

    def _new_id(self) -> str:
        return uuid.uuid4().hex[:12]

    def _tasks(self) -> list[Task]:
        return decode_tree(self._tree)

    def _changed(self) -> None:
        return

    async def insert(self, task: NewTask) -> str:
        task_id = self._new_id()
        self._tree[task_id] = task.to_record()
        logger.debug("Memory insert id=%s", task_id)
        self._changed()
        return task_id

    async def overwrite(self, task_id: str, task: Task) -> None:
        self._tree[str(task_id)] = task.to_record(include_id=False)
        self._changed()

    async def remove(self, task_id: str) -> None:
        if self._tree.pop(str(task_id), None) is None:
            raise NotFoundError(str(task_id))
        self._changed()

    def count(self) -> int:
        return len(self._tree)


class MemoryTaskSource(_MemoryTree):
    """Pull-style offline store (same contract as RestTaskSource)."""

    async def fetch_all(self) -> list[Task]:
        return self._tasks()

    async def fetch_one(self, task_id: str) -> Task:
        rec = self._tree.get(str(task_id))
        task = Task.from_record(rec, task_id=task_id) if rec is not None else None
        if task is None:
            raise NotFoundError(str(task_id))
        return task


class MemoryRealtimeTree(_MemoryTree):
    """
    Push-style offline store (same contract as RealtimeTaskSource).

    Subscribers get the current snapshot immediately and after every write.
    Overwriting a missing key creates it, as a realtime `set` does.
    """

    def __init__(self, records: dict[str, TaskRecord] | None = None) -> None:
        super().__init__(records)
        self._subscribers: list[SnapshotCallback] = []

    def subscribe(self, on_snapshot: SnapshotCallback) -> Unsubscribe:
        self._subscribers.append(on_snapshot)
        on_snapshot(self._tasks())

        def _unsubscribe() -> None:
            if on_snapshot in self._subscribers:
                self._subscribers.remove(on_snapshot)

        return _unsubscribe

    async def remove(self, task_id: str) -> None:
        # Removing a missing path is not an error in a realtime tree.
        if self._tree.pop(str(task_id), None) is not None:
            self._changed()

    def _changed(self) -> None:
        snapshot = self._tasks()
        for cb in list(self._subscribers):
            try:
                cb(snapshot)
            except Exception:
                logger.exception("Snapshot subscriber failed")
