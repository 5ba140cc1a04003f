# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- picks the task store (REST, realtime tree, or the in-memory fallback),
- wires it into a TaskSync core held by AppState.
"""

from __future__ import annotations

import contextlib
import logging

from ..config import BACKEND_REALTIME, get_settings
from ..core.ports import TaskSource
from ..core.state import AppState
from ..backends.memory_source import MemoryRealtimeTree, MemoryTaskSource
from ..backends.realtime_source import RealtimeTaskSource
from ..backends.rest_source import RestTaskSource
from ..tasks.task_sync import TaskSync

logger = logging.getLogger(__name__)


def create_task_source(settings) -> tuple[TaskSource, str]:
    """
    Build the configured store. Returns (source, label).

    An unconfigured endpoint falls back to the in-memory store of the same
    synchronization style, so the app still runs for demos.
    """
    timeout = float(getattr(settings, "request_timeout_seconds", 10.0))
    collection = str(getattr(settings, "collection", "toDos"))

    if getattr(settings, "backend", "") == BACKEND_REALTIME:
        db_url = (getattr(settings, "realtime_db_url", "") or "").strip()
        if not db_url:
            logger.warning("TODO_REALTIME_DB_URL is not set; using an in-memory realtime tree")
            return MemoryRealtimeTree(), "memory (push)"
        source = RealtimeTaskSource(
            db_url,
            path=collection,
            auth_token=getattr(settings, "realtime_auth_token", None),
            timeout_seconds=timeout,
        )
        return source, f"realtime {db_url}"

    base_url = (getattr(settings, "rest_base_url", "") or "").strip()
    if not base_url:
        logger.warning("TODO_REST_BASE_URL is not set; using an in-memory store")
        return MemoryTaskSource(), "memory (pull)"
    return RestTaskSource(base_url, collection=collection, timeout_seconds=timeout), f"rest {base_url}"


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    source, label = create_task_source(settings)
    sync = TaskSync(source, search_delay_seconds=settings.search_delay_seconds)
    logger.info("Task store: %s (%s)", label, "push" if sync.is_push else "pull")
    return AppState(settings=settings, sync=sync, backend_label=label)


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await state.sync.stop()
    except Exception:
        logger.exception("Failed to stop task sync.")

    aclose = getattr(state.sync.source, "aclose", None)
    if aclose is not None:
        with contextlib.suppress(Exception):
            await aclose()
