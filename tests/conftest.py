# tests/conftest.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from todo_sync.backends.memory_source import MemoryRealtimeTree, MemoryTaskSource
from todo_sync.core.state import AppState
from todo_sync.tasks.task_sync import TaskSync


@pytest.fixture()
def settings(tmp_path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap helpers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        log_file="todo.log",
        backend="rest",
        collection="toDos",
        request_timeout_seconds=1.0,
        rest_base_url="",
        realtime_db_url="",
        realtime_auth_token=None,
        search_delay_seconds=0.0,
    )


@pytest.fixture()
def store() -> MemoryTaskSource:
    return MemoryTaskSource(
        {
            "a1": {"userName": "Ann", "toDo": "buy milk", "completed": False},
            "b2": {"userName": "Bob", "toDo": "Walk the dog", "completed": True},
            "c3": {"userName": "Ира", "toDo": "allocate budget", "completed": False},
        }
    )


@pytest.fixture()
def tree() -> MemoryRealtimeTree:
    return MemoryRealtimeTree(
        {
            "-Na1": {"userName": "Ann", "toDo": "buy milk", "completed": False},
            "-Nb2": {"userName": "Bob", "toDo": "Walk the dog", "completed": True},
        }
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: MemoryTaskSource) -> AppState:
    """AppState wired to an in-memory pull store with no search delay."""
    return AppState(
        settings=settings,
        sync=TaskSync(store, search_delay_seconds=0.0),
        backend_label="memory (pull)",
    )
