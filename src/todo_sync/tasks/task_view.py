# src/todo_sync/tasks/task_view.py

"""
Canonical collection and its read-side projections.

The collection is a cache of the remote store: every load replaces it wholesale
and its order is the order the store delivered. Sorting and filtering never touch
that order; they return new lists.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .task_models import Task

LIST_TEXT_LIMIT = 40
ELLIPSIS = "..."


class TaskCollection:
    """In-memory copy of the store. Written only by the sync core."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._tasks: tuple[Task, ...] = ()
        self._by_id: dict[str, Task] = {}
        self.load(tasks)

    def load(self, tasks: Iterable[Task]) -> TaskCollection:
        ordered = tuple(tasks)
        self._tasks = ordered
        self._by_id = {t.id: t for t in ordered}
        return self

    def get(self, task_id: str) -> Task | None:
        return self._by_id.get(str(task_id))

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self):
        return iter(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return str(task_id) in self._by_id


def project_sorted(tasks: Iterable[Task]) -> list[Task]:
    # sorted() is stable: equal case-folded texts keep canonical order.
    return sorted(tasks, key=lambda t: t.text.lower())


def project_filtered(tasks: Iterable[Task], query: str) -> list[Task]:
    if not query:
        return list(tasks)
    return [t for t in tasks if query in t.text]


@dataclass(slots=True)
class TaskView:
    """Projection settings applied on top of the canonical collection."""

    sort_by_text: bool = False
    query: str = ""

    def visible(self, collection: TaskCollection | Sequence[Task]) -> list[Task]:
        tasks: list[Task] = list(collection)
        if self.sort_by_text:
            tasks = project_sorted(tasks)
        return project_filtered(tasks, self.query)


def format_list_text(task: Task) -> str:
    text = task.text
    if len(text) >= LIST_TEXT_LIMIT:
        return f"{text[:LIST_TEXT_LIMIT]}{ELLIPSIS}"
    return text


def format_list_line(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id}: {format_list_text(task)}"


def format_detail(task: Task) -> str:
    return (
        f"Имя: {task.user_name}\n"
        f"Задача: {task.text}\n"
        f"Статус: {task.state.value}"
    )
