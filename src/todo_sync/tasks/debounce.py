# src/todo_sync/tasks/debounce.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    A single pending-request slot.

    trigger(value) cancels whatever is scheduled and schedules `action(value)`
    after `delay_seconds` of quiet. Only the last value of a burst is delivered.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay_seconds: float, action: Callable[[T], Awaitable[None]]) -> None:
        self._delay = max(0.0, float(delay_seconds))
        self._action = action
        self._pending: asyncio.Task[None] | None = None

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def trigger(self, value: T) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._run(value))

    def cancel(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def wait(self) -> None:
        """Wait for the currently scheduled action (if any) to finish."""
        task = self._pending
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self, value: T) -> None:
        await asyncio.sleep(self._delay)
        try:
            await self._action(value)
        except Exception:
            logger.exception("Debounced action failed")
