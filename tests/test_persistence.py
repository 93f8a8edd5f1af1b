# tests/test_persistence.py

from __future__ import annotations

import json
from datetime import timedelta

import pytest

from taskmaster.core.errors import PersistenceError
from taskmaster.storage.persistence import (
    DARK_MODE_SLOT,
    TASKS_SLOT,
    TaskPersistence,
    format_timestamp,
    parse_timestamp,
)
from taskmaster.tasks.task_models import Priority, Task

from .fakes import T0, FlakySlotStore


def _record(tid: str, **overrides) -> dict:
    rec = {
        "id": tid,
        "text": f"task {tid}",
        "completed": False,
        "createdAt": "2024-05-01T10:00:00.000Z",
        "priority": "Medium",
    }
    rec.update(overrides)
    return rec


def test_missing_slot_loads_empty(persistence: TaskPersistence) -> None:
    assert persistence.load_tasks() == []


@pytest.mark.parametrize("payload", ["{not json", '{"id": "x"}', "42", "null", ""])
def test_unparsable_payload_degrades_to_empty(payload: str) -> None:
    p = TaskPersistence(FlakySlotStore({TASKS_SLOT: payload}))
    assert p.load_tasks() == []


def test_read_failure_degrades_to_empty() -> None:
    slots = FlakySlotStore({TASKS_SLOT: json.dumps([_record("a")])})
    slots.fail_reads = True
    p = TaskPersistence(slots)

    assert p.load_tasks() == []
    assert p.load_dark_mode() is False


def test_save_writes_reference_record_format(persistence: TaskPersistence, slots: FlakySlotStore) -> None:
    task = Task(id="abc", text="Write report", created_at=T0, completed=True, priority=Priority.HIGH)

    persistence.save_tasks([task])

    assert json.loads(slots.get(TASKS_SLOT) or "") == [
        {
            "id": "abc",
            "text": "Write report",
            "completed": True,
            "createdAt": "2024-05-01T10:00:00.000Z",
            "priority": "High",
        }
    ]


def test_load_preserves_order_and_fields() -> None:
    records = [
        _record("b", priority="High", completed=True, createdAt="2024-05-02T08:30:15.250Z"),
        _record("a", priority="Low"),
    ]
    p = TaskPersistence(FlakySlotStore({TASKS_SLOT: json.dumps(records)}))

    tasks = p.load_tasks()

    assert [t.id for t in tasks] == ["b", "a"]
    assert tasks[0].completed is True
    assert tasks[0].priority == Priority.HIGH
    assert tasks[0].created_at == parse_timestamp("2024-05-02T08:30:15.250Z")
    assert tasks[1].priority == Priority.LOW


def test_malformed_records_are_skipped_and_duplicates_dropped() -> None:
    records = [
        _record("ok1"),
        "not a dict",
        _record("", text="empty id"),
        _record("no-text", text="   "),
        _record("bad-date", createdAt="yesterday"),
        _record("too-early", createdAt="0001-01-01T00:00:00+01:00"),
        _record("too-late", createdAt="9999-12-31T23:59:59-01:00"),
        _record("str-done", completed="false"),
        _record("int-done", completed=1),
        _record("ok1", text="duplicate"),
        _record("odd-prio", priority="Urgent"),
    ]
    p = TaskPersistence(FlakySlotStore({TASKS_SLOT: json.dumps(records)}))

    tasks = p.load_tasks()

    assert [t.id for t in tasks] == ["ok1", "odd-prio"]
    assert tasks[0].text == "task ok1"
    assert tasks[1].priority == Priority.MEDIUM


def test_missing_completed_flag_loads_as_active() -> None:
    rec = _record("m")
    del rec["completed"]
    p = TaskPersistence(FlakySlotStore({TASKS_SLOT: json.dumps([rec])}))

    assert [t.completed for t in p.load_tasks()] == [False]


def test_save_load_round_trip_is_idempotent(slots: FlakySlotStore) -> None:
    records = [
        _record("x", createdAt="2024-05-01T10:00:00Z", priority="low"),
        _record("y", createdAt="2024-05-01T12:00:00.123+02:00", completed=True),
    ]
    slots.set(TASKS_SLOT, json.dumps(records))
    p = TaskPersistence(slots)

    p.save_tasks(p.load_tasks())
    first = slots.get(TASKS_SLOT)
    p.save_tasks(p.load_tasks())
    second = slots.get(TASKS_SLOT)

    assert first == second
    assert json.loads(first or "")[1]["createdAt"] == "2024-05-01T10:00:00.123Z"


def test_save_failure_raises_persistence_error(persistence: TaskPersistence, slots: FlakySlotStore) -> None:
    slots.fail_writes = True
    with pytest.raises(PersistenceError):
        persistence.save_tasks([])
    with pytest.raises(PersistenceError):
        persistence.save_dark_mode(True)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, False), ("true", True), (" TRUE ", True), ("false", False), ("yes", False), ("", False)],
)
def test_dark_mode_load(raw: str | None, expected: bool) -> None:
    initial = {} if raw is None else {DARK_MODE_SLOT: raw}
    assert TaskPersistence(FlakySlotStore(initial)).load_dark_mode() is expected


def test_dark_mode_save(persistence: TaskPersistence, slots: FlakySlotStore) -> None:
    persistence.save_dark_mode(True)
    assert slots.get(DARK_MODE_SLOT) == "true"
    persistence.save_dark_mode(False)
    assert slots.get(DARK_MODE_SLOT) == "false"
    # the preference lives in its own slot
    assert slots.get(TASKS_SLOT) is None


def test_timestamp_format_is_utc_millis() -> None:
    assert format_timestamp(T0 + timedelta(microseconds=456789)) == "2024-05-01T10:00:00.456Z"
