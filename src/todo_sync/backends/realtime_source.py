# src/todo_sync/backends/realtime_source.py

from __future__ import annotations

"""
Push-style adapter for a realtime JSON tree (Firebase Realtime Database REST API).

Writes:
- create: POST {db}/toDos.json       -> {"name": "<generated key>"}
- update: PUT  {db}/toDos/{id}.json  (full record set on the task's own path)
- delete: DELETE {db}/toDos/{id}.json

Reads come from a server-sent-events stream on {db}/toDos.json. The stream
sends `put` / `patch` events relative to the subscribed root; we mirror them in
a local tree and emit the whole tree as a task snapshot after each one.

When the stream ends or fails it is logged and not restarted.
"""

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..core.errors import TransportError
from ..core.ports import SnapshotCallback, Unsubscribe
from ..tasks.task_models import NewTask, Task, decode_tree

logger = logging.getLogger(__name__)


# ---- tree helpers ----

def _split_path(path: str) -> list[str]:
    return [p for p in (path or "").split("/") if p]


def apply_put(tree: Any, path: str, data: Any) -> Any:
    """Set `data` at `path` inside `tree`; None deletes. Returns the new root."""
    parts = _split_path(path)
    if not parts:
        return data

    root = tree if isinstance(tree, dict) else {}
    node = root
    for key in parts[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            if data is None:
                return root
            child = {}
            node[key] = child
        node = child

    if data is None:
        node.pop(parts[-1], None)
    else:
        node[parts[-1]] = data
    return root


def apply_patch(tree: Any, path: str, data: Any) -> Any:
    """Merge each child of `data` under `path` (a multi-location update)."""
    if not isinstance(data, dict):
        return tree
    base = "/".join(_split_path(path))
    for key, value in data.items():
        tree = apply_put(tree, f"{base}/{key}" if base else str(key), value)
    return tree


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str, str]]:
    """Parse `event:` / `data:` line pairs; yields (event, data) per blank-line frame."""
    event = ""
    data_lines: list[str] = []
    async for raw in lines:
        line = raw.rstrip("\r")
        if not line:
            if event or data_lines:
                yield event or "message", "\n".join(data_lines)
            event, data_lines = "", []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        value = value[1:] if value.startswith(" ") else value
        if field == "event":
            event = value
        elif field == "data":
            data_lines.append(value)
    if event or data_lines:
        yield event or "message", "\n".join(data_lines)


class RealtimeTaskSource:
    def __init__(
        self,
        database_url: str,
        *,
        path: str = "toDos",
        auth_token: str | None = None,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not database_url or not database_url.strip():
            raise ValueError("Realtime database URL is required")
        self._db_url = database_url.rstrip("/")
        self._path = path.strip("/")
        self._auth_token = (auth_token or "").strip() or None
        self._timeout = max(1.0, float(timeout_seconds))
        self._owns_client = client is None
        # The streaming endpoint answers with a redirect to the serving node.
        self._client = client or httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)

        self._tree: Any = None
        self._stream_task: asyncio.Task[None] | None = None
        # Cancelled streams still unwinding; aclose() waits for them.
        self._retired: list[asyncio.Task[None]] = []

    @property
    def streaming(self) -> bool:
        task = self._stream_task
        return task is not None and not task.done() and not task.cancelling()

    async def aclose(self) -> None:
        tasks = [*self._retired, *([self._stream_task] if self._stream_task is not None else [])]
        self._retired.clear()
        self._stream_task = None
        for task in tasks:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task
        if self._owns_client:
            await self._client.aclose()

    def _url(self, task_id: str | None = None) -> str:
        if task_id is None:
            return f"{self._db_url}/{self._path}.json"
        return f"{self._db_url}/{self._path}/{task_id}.json"

    def _params(self) -> dict[str, str]:
        return {"auth": self._auth_token} if self._auth_token else {}

    async def _request(self, method: str, url: str, *, json_body: Any = None) -> Any:
        try:
            resp = await self._client.request(method, url, params=self._params(), json=json_body)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e.__class__.__name__}") from e

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if resp.status_code >= 400:
            raise TransportError(f"{method} {url} -> HTTP {resp.status_code}")
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} returned invalid JSON") from e

    # ---- writes ----

    async def insert(self, task: NewTask) -> str:
        data = await self._request("POST", self._url(), json_body=task.to_record())
        key = data.get("name") if isinstance(data, dict) else None
        if not key:
            raise TransportError("Realtime push returned no key")
        return str(key)

    async def overwrite(self, task_id: str, task: Task) -> None:
        await self._request("PUT", self._url(task_id), json_body=task.to_record(include_id=False))

    async def remove(self, task_id: str) -> None:
        await self._request("DELETE", self._url(task_id))

    # ---- live stream ----

    def subscribe(self, on_snapshot: SnapshotCallback) -> Unsubscribe:
        if self.streaming:
            raise RuntimeError("RealtimeTaskSource supports a single subscription")
        if self._stream_task is not None and not self._stream_task.done():
            self._retired.append(self._stream_task)

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._stream(on_snapshot))
        self._stream_task = task

        def _unsubscribe() -> None:
            # Only cancel here; the reference stays so aclose() can await the unwind.
            task.cancel()

        return _unsubscribe

    async def _stream(self, on_snapshot: SnapshotCallback) -> None:
        url = self._url()
        timeout = httpx.Timeout(self._timeout, read=None)
        headers = {"Accept": "text/event-stream"}
        try:
            async with self._client.stream(
                "GET", url, params=self._params(), headers=headers, timeout=timeout
            ) as resp:
                if resp.status_code >= 400:
                    logger.error("Realtime stream rejected: HTTP %s", resp.status_code)
                    return
                logger.info("Realtime stream open url=%s", url)
                async for event, data in iter_sse_events(resp.aiter_lines()):
                    if not self.handle_event(event, data, on_snapshot):
                        break
        except asyncio.CancelledError:
            raise
        except httpx.HTTPError:
            logger.exception("Realtime stream failed url=%s", url)
            return
        logger.warning("Realtime stream closed url=%s; view will not update", url)

    def handle_event(self, event: str, data: str, on_snapshot: SnapshotCallback) -> bool:
        """Apply one stream event. Returns False when the stream must stop."""
        if event == "keep-alive":
            return True
        if event in ("cancel", "auth_revoked"):
            logger.warning("Realtime stream %s: %s", event, data)
            return False
        if event not in ("put", "patch"):
            logger.debug("Ignoring realtime event %s", event)
            return True

        try:
            payload = json.loads(data) if data else None
        except ValueError:
            logger.warning("Malformed realtime event payload: %r", data)
            return True
        if not isinstance(payload, dict):
            return True

        path = str(payload.get("path") or "/")
        if event == "put":
            self._tree = apply_put(self._tree, path, payload.get("data"))
        else:
            self._tree = apply_patch(self._tree, path, payload.get("data"))

        try:
            on_snapshot(decode_tree(self._tree))
        except Exception:
            logger.exception("Snapshot callback failed")
        return True
