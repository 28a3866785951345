from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from taskflow.domain.entities import Task
from taskflow.infra.repository import (
    COUNTER_KEY,
    TASKS_KEY,
    PersistedState,
    PersistenceError,
    TaskRepository,
    format_timestamp,
    parse_timestamp,
)
from taskflow.infra.storage import MemoryKeyValueStorage, SqlKeyValueStorage, StorageError
from taskflow.services.task_store import TaskStore


class BrokenStorage:
    def get_item(self, key: str) -> str | None:
        raise StorageError("disk unavailable")

    def set_items(self, items) -> None:
        raise StorageError("disk unavailable")

    def remove_item(self, key: str) -> None:
        raise StorageError("disk unavailable")


def _record(**overrides) -> dict:
    record = {
        "id": 1,
        "text": "Buy milk",
        "completed": False,
        "createdAt": "2026-01-01T09:00:00.000Z",
        "completedAt": None,
    }
    record.update(overrides)
    return record


def _load(records) -> PersistedState:
    storage = MemoryKeyValueStorage({TASKS_KEY: json.dumps(records)})
    return TaskRepository(storage).load()


def test_save_writes_wire_format() -> None:
    storage = MemoryKeyValueStorage()
    created = datetime(2026, 3, 4, 5, 6, 7, 890000, tzinfo=timezone.utc)
    task = Task(id=3, text="Pay bills", completed=True, created_at=created, completed_at=created)

    TaskRepository(storage).save([task], 4)

    assert json.loads(storage.items[TASKS_KEY]) == [
        {
            "id": 3,
            "text": "Pay bills",
            "completed": True,
            "createdAt": "2026-03-04T05:06:07.890Z",
            "completedAt": "2026-03-04T05:06:07.890Z",
        }
    ]
    assert storage.items[COUNTER_KEY] == "4"


def test_load_missing_keys_is_empty() -> None:
    state = TaskRepository(MemoryKeyValueStorage()).load()

    assert state == PersistedState()


def test_load_reads_browser_written_records() -> None:
    state = _load([_record(id=2, completed=True, completedAt="2026-01-02T10:00:00.000Z"), _record()])

    assert [task.id for task in state.tasks] == [2, 1]
    assert state.tasks[0].completed_at == datetime(2026, 1, 2, 10, tzinfo=timezone.utc)
    assert state.tasks[1].completed_at is None


def test_load_skips_malformed_records() -> None:
    state = _load(
        [
            _record(id=1),
            _record(id="2"),
            _record(id=True),
            _record(id=3, text="   "),
            _record(id=4, text="x" * 101),
            _record(id=5, createdAt="yesterday"),
            _record(id=6, completed="yes"),
            _record(id=1, text="duplicate"),
            "not a record",
            _record(id=7),
        ]
    )

    assert [task.id for task in state.tasks] == [1, 7]
    assert state.tasks[0].text == "Buy milk"


def test_load_normalizes_completion_timestamp() -> None:
    state = _load(
        [
            _record(id=1, completed=False, completedAt="2026-01-02T10:00:00.000Z"),
            _record(id=2, completed=True, completedAt=None),
        ]
    )

    pending, done = state.tasks
    assert pending.completed_at is None
    assert done.completed_at == done.created_at


def test_load_non_list_payload_is_empty() -> None:
    storage = MemoryKeyValueStorage({TASKS_KEY: '{"id": 1}', COUNTER_KEY: "9"})

    state = TaskRepository(storage).load()

    assert state.tasks == ()
    assert state.counter == 9


def test_load_storage_failure_degrades_to_empty() -> None:
    assert TaskRepository(BrokenStorage()).load() == PersistedState()


def test_save_storage_failure_raises_persistence_error() -> None:
    with pytest.raises(PersistenceError, match="disk unavailable"):
        TaskRepository(BrokenStorage()).save([], 1)


def test_timestamps_accept_offsets_and_naive_values() -> None:
    assert parse_timestamp("2026-01-01T12:00:00+02:00") == datetime(2026, 1, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2026-01-01T10:00:00") == datetime(2026, 1, 1, 10, tzinfo=timezone.utc)
    assert format_timestamp(datetime(2026, 1, 1, 10)) == "2026-01-01T10:00:00.000Z"


class UnencodableStorage(MemoryKeyValueStorage):
    def set_items(self, items) -> None:
        for value in items.values():
            value.encode("utf-8")
        super().set_items(items)


def test_lone_surrogate_text_is_saved_escaped() -> None:
    storage = UnencodableStorage()
    store = TaskStore(TaskRepository(storage))

    result = store.add_task("bad \ud800 text")

    assert result.ok and result.persisted
    assert "\\ud800" in storage.items[TASKS_KEY]
    assert TaskStore(TaskRepository(storage)).tasks == store.tasks


def test_lone_surrogate_from_stored_record_survives_toggle(tmp_path) -> None:
    storage = SqlKeyValueStorage(f"sqlite:///{tmp_path / 'taskflow.sqlite3'}")
    storage.set_items({TASKS_KEY: json.dumps([_record(text="x\ud800")])})
    store = TaskStore(TaskRepository(storage))

    result = store.toggle_task(1)

    assert result.ok and result.persisted
    assert TaskStore(TaskRepository(storage)).tasks[0].text == "x\ud800"
    storage.close()


def test_save_encoding_failure_raises_persistence_error() -> None:
    class RawStorage(MemoryKeyValueStorage):
        def set_items(self, items) -> None:
            raise UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")

    with pytest.raises(PersistenceError, match="cannot encode"):
        TaskRepository(RawStorage()).save([], 1)
