# src/todo_sync/tasks/task_models.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

# Wire keys used by both remote stores.
KEY_ID = "id"
KEY_USER_NAME = "userName"
KEY_TEXT = "toDo"
KEY_COMPLETED = "completed"

TaskRecord = dict[str, Any]


class TaskState(StrEnum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(slots=True, frozen=True)
class NewTask:
    """Insert payload: a task the store has not assigned an id to yet."""

    user_name: str
    text: str
    completed: bool = False

    def to_record(self) -> TaskRecord:
        return {
            KEY_USER_NAME: self.user_name,
            KEY_TEXT: self.text,
            KEY_COMPLETED: self.completed,
        }


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    user_name: str
    text: str
    completed: bool = False

    @property
    def state(self) -> TaskState:
        return TaskState.COMPLETED if self.completed else TaskState.ACTIVE

    def to_record(self, *, include_id: bool = True) -> TaskRecord:
        record: TaskRecord = {}
        if include_id:
            record[KEY_ID] = self.id
        record[KEY_USER_NAME] = self.user_name
        record[KEY_TEXT] = self.text
        record[KEY_COMPLETED] = self.completed
        return record

    @classmethod
    def from_record(cls, record: Any, *, task_id: Any = None) -> Task | None:
        """
        Decode a stored record, leniently.

        Legacy records may miss fields or carry odd types; those are coerced.
        Returns None when the record is not a mapping or has no usable id.
        The realtime tree keeps the id as the child key, so it can be passed in.
        """
        if not isinstance(record, Mapping):
            return None

        raw_id = task_id if task_id is not None else record.get(KEY_ID)
        if raw_id is None or str(raw_id).strip() == "":
            return None

        return cls(
            id=str(raw_id),
            user_name=_as_text(record.get(KEY_USER_NAME)),
            text=_as_text(record.get(KEY_TEXT)),
            completed=bool(record.get(KEY_COMPLETED) or False),
        )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def decode_records(records: Any) -> list[Task]:
    """Decode a REST array of records, keeping arrival order and skipping bad rows."""
    if not isinstance(records, list):
        logger.warning("Expected a list of task records, got %s", type(records).__name__)
        return []

    out: list[Task] = []
    for raw in records:
        task = Task.from_record(raw)
        if task is None:
            logger.warning("Skipping task record without id: %r", raw)
            continue
        out.append(task)
    return out


def decode_tree(tree: Any) -> list[Task]:
    """Decode a realtime subtree ({id: record}); a missing subtree is an empty list."""
    if tree is None:
        return []

    items: Iterable[tuple[Any, Any]]
    if isinstance(tree, Mapping):
        items = tree.items()
    elif isinstance(tree, list):
        # Trees with numeric keys may come back as arrays with holes.
        items = ((i, v) for i, v in enumerate(tree) if v is not None)
    else:
        logger.warning("Unexpected realtime snapshot type: %s", type(tree).__name__)
        return []

    out: list[Task] = []
    for key, raw in items:
        task = Task.from_record(raw, task_id=key)
        if task is None:
            logger.warning("Skipping malformed realtime record key=%s", key)
            continue
        out.append(task)
    return out
