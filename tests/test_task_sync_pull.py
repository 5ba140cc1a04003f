# tests/test_task_sync_pull.py

from __future__ import annotations

import pytest

from todo_sync.backends.memory_source import MemoryTaskSource
from todo_sync.core.errors import ValidationError
from todo_sync.tasks.task_sync import TaskSync

from .fakes import FlakyTaskSource

RECORDS = {
    "a1": {"userName": "Ann", "toDo": "buy milk", "completed": False},
    "b2": {"userName": "Bob", "toDo": "Walk the dog", "completed": True},
}


@pytest.mark.asyncio
async def test_start_loads_store_in_arrival_order(store: MemoryTaskSource) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    assert not sync.is_push

    await sync.start()

    assert [t.id for t in sync.visible()] == ["a1", "b2", "c3"]


@pytest.mark.asyncio
async def test_create_then_load_round_trip() -> None:
    store = MemoryTaskSource()
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    await sync.create("Ann", "buy milk")

    tasks = sync.visible()
    assert len(tasks) == 1
    assert tasks[0].id
    assert tasks[0].user_name == "Ann"
    assert tasks[0].text == "buy milk"
    assert tasks[0].completed is False


@pytest.mark.asyncio
async def test_invalid_create_sends_nothing() -> None:
    store = FlakyTaskSource()
    sync = TaskSync(store, search_delay_seconds=0.0)

    with pytest.raises(ValidationError) as exc_info:
        await sync.create("John123", "hi")

    assert exc_info.value.field == "userName"
    assert exc_info.value.rule == "pattern"
    assert store.writes == []
    assert store.count() == 0


@pytest.mark.asyncio
async def test_toggle_twice_restores_value(store: MemoryTaskSource) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    await sync.toggle_completed("a1")
    assert sync.get("a1").completed is True

    await sync.toggle_completed("a1")
    assert sync.get("a1").completed is False


@pytest.mark.asyncio
async def test_rename_and_edit_rewrite_whole_record(store: MemoryTaskSource) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    await sync.rename_owner("b2", "Robert")
    await sync.edit_text("b2", "Walk the cat")

    task = await store.fetch_one("b2")
    assert task.user_name == "Robert"
    assert task.text == "Walk the cat"
    assert task.completed is True
    assert sync.get("b2") == task


@pytest.mark.asyncio
async def test_rename_does_not_validate(store: MemoryTaskSource) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    await sync.rename_owner("a1", "Ann2024")

    assert sync.get("a1").user_name == "Ann2024"


@pytest.mark.asyncio
async def test_mutating_missing_id_is_a_silent_no_op(store: MemoryTaskSource, caplog) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()
    before = sync.visible()

    await sync.rename_owner("nope", "Ann")
    await sync.toggle_completed("nope")
    await sync.delete("nope")

    assert sync.visible() == before
    assert "does not exist" in caplog.text


@pytest.mark.asyncio
async def test_delete_then_view_is_not_found(store: MemoryTaskSource) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()
    assert sync.get("a1") is not None

    await sync.delete("a1")

    assert sync.get("a1") is None
    assert [t.id for t in sync.visible()] == ["b2", "c3"]


@pytest.mark.asyncio
async def test_transport_failure_keeps_stale_view() -> None:
    store = FlakyTaskSource(RECORDS)
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    store.fail_reads = True
    assert await sync.reload() is False
    await sync.toggle_completed("a1")

    assert [t.id for t in sync.visible()] == ["a1", "b2"]
    assert sync.get("a1").completed is False


@pytest.mark.asyncio
async def test_failed_write_is_not_retried() -> None:
    store = FlakyTaskSource(RECORDS)
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    store.fail_writes = True
    await sync.create("Ann", "buy bread")
    await sync.edit_text("a1", "buy cheese")

    assert store.writes == [("insert", None), ("overwrite", "a1")]
    assert len(sync.collection) == 2
    assert sync.get("a1").text == "buy milk"


@pytest.mark.asyncio
async def test_every_mutation_reloads() -> None:
    store = FlakyTaskSource(RECORDS)
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()
    assert store.fetch_all_calls == 1

    await sync.create("Ann", "buy bread")
    await sync.toggle_completed("a1")
    await sync.delete("b2")

    assert store.fetch_all_calls == 4
    # Pull variant reads the stored record before overwriting it.
    assert store.fetch_one_calls == 1


@pytest.mark.asyncio
async def test_sort_toggle_reloads_and_projects() -> None:
    store = FlakyTaskSource(
        {
            "1": {"userName": "A", "toDo": "zebra", "completed": False},
            "2": {"userName": "B", "toDo": "Apple", "completed": False},
        }
    )
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()

    await sync.set_sorted(True)
    assert [t.id for t in sync.visible()] == ["2", "1"]
    assert [t.id for t in sync.collection] == ["1", "2"]
    assert store.fetch_all_calls == 2

    await sync.toggle_sorted()
    assert [t.id for t in sync.visible()] == ["1", "2"]


@pytest.mark.asyncio
async def test_search_is_debounced_and_refetches_once() -> None:
    store = FlakyTaskSource(RECORDS)
    sync = TaskSync(store, search_delay_seconds=0.02)
    await sync.start()

    for q in ("W", "Wa", "Wal"):
        sync.search(q)
    assert sync.pending_query == "Wal"
    await sync.search_settled()

    assert sync.view.query == "Wal"
    assert [t.id for t in sync.visible()] == ["b2"]
    assert store.fetch_all_calls == 2

    sync.search("")
    await sync.search_settled()
    assert [t.id for t in sync.visible()] == ["a1", "b2"]


@pytest.mark.asyncio
async def test_listeners_fire_on_reload(store: MemoryTaskSource) -> None:
    sync = TaskSync(store, search_delay_seconds=0.0)
    calls: list[int] = []
    sync.add_listener(lambda: calls.append(len(sync.collection)))

    await sync.start()

    assert calls == [3]


def test_unknown_source_is_rejected() -> None:
    with pytest.raises(TypeError):
        TaskSync(object())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_sort_and_search_notify_once_even_when_reload_fails() -> None:
    store = FlakyTaskSource(RECORDS)
    sync = TaskSync(store, search_delay_seconds=0.0)
    await sync.start()
    seen: list[list[str]] = []
    sync.add_listener(lambda: seen.append([t.id for t in sync.visible()]))

    await sync.set_sorted(True)
    assert seen == [["a1", "b2"]]

    store.fail_reads = True
    await sync.set_sorted(False)
    sync.search("dog")
    await sync.search_settled()

    # Stale data, but the view settings still reach the listener.
    assert seen[1:] == [["a1", "b2"], ["b2"]]
    assert store.fetch_all_calls == 4
