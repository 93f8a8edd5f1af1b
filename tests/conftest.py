# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskmaster.cli.bootstrap import create_initial_state
from taskmaster.core.state import AppState
from taskmaster.storage.persistence import TaskPersistence
from taskmaster.tasks.task_store import TaskStore

from .fakes import FakeClock, FlakySlotStore, RecordingNotifier, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskmaster-test",
        log_level="WARNING",
        data_dir=tmp_path,
        store_path=tmp_path / "taskmaster.sqlite3",
        log_dir=tmp_path,
        notify_seconds=3.0,
        console_color=False,
    )


@pytest.fixture()
def slots() -> FlakySlotStore:
    return FlakySlotStore()


@pytest.fixture()
def persistence(slots: FlakySlotStore) -> TaskPersistence:
    return TaskPersistence(slots)


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(persistence: TaskPersistence, notifier: RecordingNotifier, clock: FakeClock) -> TaskStore:
    return TaskStore(persistence, notifier, clock=clock, id_factory=SequentialIds())


@pytest.fixture()
def state(settings: SimpleNamespace, slots: FlakySlotStore, notifier: RecordingNotifier) -> AppState:
    """
    AppState wired through the real composition root, with in-memory slots.
    """
    return create_initial_state(settings=settings, slots=slots, sinks=[notifier])
