# src/todo_sync/backends/rest_source.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import NotFoundError, TransportError
from ..tasks.task_models import NewTask, Task, TaskRecord, decode_records

logger = logging.getLogger(__name__)


def _make_timeout(timeout_seconds: float) -> httpx.Timeout:
    t = max(1.0, float(timeout_seconds))
    return httpx.Timeout(connect=t, read=t, write=t, pool=t)


class RestTaskSource:
    """
    Pull-style adapter for a JSON REST collection:

        GET    /toDos         -> [record, ...]
        POST   /toDos         -> created record (server assigns id)
        GET    /toDos/{id}    -> record
        PUT    /toDos/{id}    -> updated record (full overwrite)
        DELETE /toDos/{id}

    404 becomes NotFoundError; any other HTTP or network failure becomes
    TransportError. No retries.
    """

    def __init__(
        self,
        base_url: str,
        *,
        collection: str = "toDos",
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("REST base URL is required")
        self._base_url = base_url.rstrip("/")
        self._collection = collection.strip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=_make_timeout(timeout_seconds))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, task_id: str | None = None) -> str:
        url = f"{self._base_url}/{self._collection}"
        if task_id is not None:
            url = f"{url}/{task_id}"
        return url

    async def _request(
        self,
        method: str,
        url: str,
        *,
        task_id: str | None = None,
        json: TaskRecord | None = None,
    ) -> Any:
        try:
            resp = await self._client.request(method, url, json=json)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e.__class__.__name__}") from e

        logger.debug("%s %s -> %s", method, url, resp.status_code)

        if resp.status_code == 404 and task_id is not None:
            raise NotFoundError(task_id)
        if resp.status_code >= 400:
            raise TransportError(f"{method} {url} -> HTTP {resp.status_code}")

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} returned invalid JSON") from e

    async def fetch_all(self) -> list[Task]:
        data = await self._request("GET", self._url())
        return decode_records(data)

    async def fetch_one(self, task_id: str) -> Task:
        data = await self._request("GET", self._url(task_id), task_id=task_id)
        task = Task.from_record(data, task_id=task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    async def insert(self, task: NewTask) -> str:
        data = await self._request("POST", self._url(), json=task.to_record())
        created = Task.from_record(data)
        if created is None:
            raise TransportError("Server response for create carries no id")
        logger.info("Server created task id=%s", created.id)
        return created.id

    async def overwrite(self, task_id: str, task: Task) -> None:
        await self._request("PUT", self._url(task_id), task_id=task_id, json=task.to_record())

    async def remove(self, task_id: str) -> None:
        await self._request("DELETE", self._url(task_id), task_id=task_id)
