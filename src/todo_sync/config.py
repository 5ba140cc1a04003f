# src/todo_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- An empty endpoint is allowed: the app then runs on an in-memory store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"

BACKEND_REST = "rest"
BACKEND_REALTIME = "realtime"
BACKENDS = (BACKEND_REST, BACKEND_REALTIME)

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path
    log_file: str

    # ---- Store selection ----
    backend: str
    collection: str
    request_timeout_seconds: float

    # ---- REST (pull) ----
    rest_base_url: str

    # ---- Realtime tree (push) ----
    realtime_db_url: str
    realtime_auth_token: str | None

    # ---- Search debounce (milliseconds) ----
    search_delay_pull_ms: int
    search_delay_push_ms: int

    @property
    def search_delay_seconds(self) -> float:
        ms = self.search_delay_push_ms if self.backend == BACKEND_REALTIME else self.search_delay_pull_ms
        return max(0, ms) / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todo-sync").strip() or "todo-sync"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        log_file = _env(_k("LOG_FILE"), "todo.log").strip()

        backend = _env(_k("BACKEND"), BACKEND_REST).strip().lower()
        if backend not in BACKENDS:
            backend = BACKEND_REST

        collection = _env(_k("COLLECTION"), "toDos").strip("/ ") or "toDos"
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0)

        rest_base_url = _env(_k("REST_BASE_URL"), "http://localhost:3005").strip()

        realtime_db_url = _env(_k("REALTIME_DB_URL"), "").strip()
        realtime_auth_token = _env(_k("REALTIME_AUTH_TOKEN"), "").strip() or None

        search_delay_pull_ms = _env_int(_k("SEARCH_DELAY_PULL_MS"), 500)
        search_delay_push_ms = _env_int(_k("SEARCH_DELAY_PUSH_MS"), 10)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            log_file=log_file,
            backend=backend,
            collection=collection,
            request_timeout_seconds=request_timeout_seconds,
            rest_base_url=rest_base_url,
            realtime_db_url=realtime_db_url,
            realtime_auth_token=realtime_auth_token,
            search_delay_pull_ms=search_delay_pull_ms,
            search_delay_push_ms=search_delay_push_ms,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
