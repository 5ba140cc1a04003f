# src/todo_sync/tasks/task_mutations.py

"""
Field-level transforms and the read-modify-write helper.

Every update is a full-record overwrite: read the current record, replace one
field, write the whole record back. Nothing here is transactional; two updates
racing on the same id end with whichever write lands last.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace

from .task_models import Task

logger = logging.getLogger(__name__)

TaskTransform = Callable[[Task], Task]
ReadTask = Callable[[str], Awaitable[Task]]
WriteTask = Callable[[str, Task], Awaitable[None]]


def with_user_name(user_name: str) -> TaskTransform:
    def _apply(task: Task) -> Task:
        return replace(task, user_name=user_name)

    return _apply


def with_text(text: str) -> TaskTransform:
    def _apply(task: Task) -> Task:
        return replace(task, text=text)

    return _apply


def toggled(task: Task) -> Task:
    return replace(task, completed=not task.completed)


async def read_modify_write(
    read: ReadTask,
    write: WriteTask,
    task_id: str,
    transform: TaskTransform,
) -> Task:
    """
    Two-step update shared by rename/edit/toggle.

    Errors from read/write propagate unchanged (NotFoundError, TransportError);
    the caller decides how to report them.
    """
    current = await read(task_id)
    updated = transform(current)
    # The id is the store key; a transform must never move a record.
    if updated.id != current.id:
        updated = replace(updated, id=current.id)
    await write(task_id, updated)
    logger.debug("Task %s rewritten", task_id)
    return updated
