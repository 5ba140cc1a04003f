# src/todo_sync/tasks/task_sync.py

from __future__ import annotations

"""
Task synchronization & mutation core.

Keeps a TaskCollection consistent with a remote store and writes user mutations
through to it. Works against either adapter style:

- pull (PullTaskSource): reload after every mutation, sort toggle and search;
- push (PushTaskSource): a live subscription replaces the collection on every
  snapshot, and mutations only write.

Failure model: validation errors are raised to the caller; NotFoundError and
TransportError are logged and the operation becomes a no-op. The view then stays
as it was until the next successful load or snapshot.
"""

import logging
from collections.abc import Callable

from ..core.errors import NotFoundError, TransportError
from ..core.ports import PullTaskSource, PushTaskSource, TaskSource, Unsubscribe
from .debounce import Debouncer
from .task_models import NewTask, Task
from .task_mutations import TaskTransform, read_modify_write, toggled, with_text, with_user_name
from .task_validation import first_error
from .task_view import TaskCollection, TaskView

logger = logging.getLogger(__name__)

DEFAULT_PULL_SEARCH_DELAY = 0.5
DEFAULT_PUSH_SEARCH_DELAY = 0.01

ChangeListener = Callable[[], None]


class TaskSync:
    def __init__(
        self,
        source: TaskSource,
        *,
        search_delay_seconds: float | None = None,
        collection: TaskCollection | None = None,
    ) -> None:
        if isinstance(source, PushTaskSource):
            self._push = True
        elif isinstance(source, PullTaskSource):
            self._push = False
        else:
            raise TypeError(f"Unsupported task source: {type(source).__name__}")

        self._source = source
        self.collection = collection if collection is not None else TaskCollection()
        self.view = TaskView()

        if search_delay_seconds is None:
            search_delay_seconds = DEFAULT_PUSH_SEARCH_DELAY if self._push else DEFAULT_PULL_SEARCH_DELAY
        self._search = Debouncer(search_delay_seconds, self._apply_search)
        self._pending_query = ""

        self._unsubscribe: Unsubscribe | None = None
        self._listeners: list[ChangeListener] = []

    # ---- lifecycle ----

    @property
    def is_push(self) -> bool:
        return self._push

    @property
    def source(self) -> TaskSource:
        return self._source

    async def start(self) -> None:
        """Initial load (pull) or subscription (push)."""
        if self._push:
            if self._unsubscribe is None:
                self._unsubscribe = self._push_source.subscribe(self._on_snapshot)
                logger.info("Subscribed to task snapshots")
            return
        await self.reload()

    async def stop(self) -> None:
        self._search.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("Unsubscribed from task snapshots")

    def add_listener(self, listener: ChangeListener) -> None:
        """Called after every collection replacement (useful for re-rendering)."""
        self._listeners.append(listener)

    # ---- read side ----

    async def reload(self) -> bool:
        """
        Pull variant: replace the collection with a fresh fetch.
        Returns False (and keeps the stale collection) when the store fails.
        """
        if self._push:
            return True
        try:
            tasks = await self._pull_source.fetch_all()
        except TransportError:
            logger.exception("Task reload failed; keeping %d cached tasks", len(self.collection))
            return False
        self._replace(tasks)
        return True

    def visible(self) -> list[Task]:
        return self.view.visible(self.collection)

    def get(self, task_id: str) -> Task | None:
        """Detail lookup; None means not found."""
        return self.collection.get(task_id)

    @property
    def pending_query(self) -> str:
        """The last typed query, possibly not applied yet."""
        return self._pending_query

    async def set_sorted(self, enabled: bool) -> None:
        self.view.sort_by_text = bool(enabled)
        # The pull variant re-requests data on every sort toggle; a successful
        # reload notifies listeners itself.
        if self._push or not await self.reload():
            self._notify()

    async def toggle_sorted(self) -> None:
        await self.set_sorted(not self.view.sort_by_text)

    def search(self, query: str) -> None:
        """Debounced: only the last query of a burst is applied."""
        self._pending_query = query or ""
        self._search.trigger(self._pending_query)

    async def search_settled(self) -> None:
        await self._search.wait()

    async def _apply_search(self, query: str) -> None:
        self.view.query = query
        if self._push or not await self.reload():
            self._notify()
        logger.debug("Search applied query=%r visible=%d", query, len(self.visible()))

    # ---- mutations ----

    async def create(self, user_name: str, text: str) -> None:
        """
        Validate and insert a new task (completed=False).
        Raises ValidationError with the first failing rule; nothing is sent then.
        """
        err = first_error(user_name, text)
        if err is not None:
            raise err.to_exception()

        try:
            task_id = await self._source.insert(NewTask(user_name=user_name, text=text, completed=False))
            logger.info("Task created id=%s", task_id)
        except TransportError:
            logger.exception("Task create failed")
        await self.reload()

    async def rename_owner(self, task_id: str, new_user_name: str) -> None:
        await self._rewrite(task_id, with_user_name(new_user_name), "rename_owner")

    async def edit_text(self, task_id: str, new_text: str) -> None:
        await self._rewrite(task_id, with_text(new_text), "edit_text")

    async def toggle_completed(self, task_id: str) -> None:
        await self._rewrite(task_id, toggled, "toggle_completed")

    async def delete(self, task_id: str) -> None:
        task_id = str(task_id)
        try:
            await self._source.remove(task_id)
            logger.info("Task deleted id=%s", task_id)
        except NotFoundError:
            logger.warning("delete: task %s does not exist", task_id)
        except TransportError:
            logger.exception("delete failed task_id=%s", task_id)
        await self.reload()

    async def _rewrite(self, task_id: str, transform: TaskTransform, op: str) -> None:
        task_id = str(task_id)
        try:
            await read_modify_write(self._read_current, self._source.overwrite, task_id, transform)
            logger.info("%s applied task_id=%s", op, task_id)
        except NotFoundError:
            logger.warning("%s: task %s does not exist", op, task_id)
        except TransportError:
            logger.exception("%s failed task_id=%s", op, task_id)
        await self.reload()

    async def _read_current(self, task_id: str) -> Task:
        if not self._push:
            return await self._pull_source.fetch_one(task_id)
        # Push variant reads the live cache instead of the store.
        task = self.collection.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    # ---- internals ----

    @property
    def _pull_source(self) -> PullTaskSource:
        return self._source  # type: ignore[return-value]

    @property
    def _push_source(self) -> PushTaskSource:
        return self._source  # type: ignore[return-value]

    def _on_snapshot(self, tasks: list[Task]) -> None:
        self._replace(tasks)

    def _replace(self, tasks: list[Task]) -> None:
        self.collection.load(tasks)
        logger.debug("Collection replaced: %d tasks", len(self.collection))
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception("Collection listener failed")
