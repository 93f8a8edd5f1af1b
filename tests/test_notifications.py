# tests/test_notifications.py

from __future__ import annotations

from taskmaster.core.notifications import (
    FanoutNotifier,
    Severity,
    Snackbar,
    TaskEvent,
    notification_for,
)

from .fakes import RecordingNotifier


class Ticker:
    def __init__(self) -> None:
        self.t = 100.0

    def __call__(self) -> float:
        return self.t


def test_event_messages() -> None:
    assert notification_for(TaskEvent.ADDED).severity == Severity.SUCCESS
    assert notification_for(TaskEvent.DELETED).message == "Task deleted"
    assert notification_for(TaskEvent.REORDERED).severity == Severity.INFO
    assert notification_for(TaskEvent.SAVE_FAILED).severity == Severity.ERROR
    assert notification_for(TaskEvent.PREFERENCES_SAVE_FAILED).message == "Failed to save preferences"
    assert notification_for(TaskEvent.UPDATED, duration_seconds=5).duration_seconds == 5


def test_snackbar_auto_dismiss() -> None:
    clock = Ticker()
    bar = Snackbar(clock=clock)
    assert bar.current() is None

    bar.notify(notification_for(TaskEvent.ADDED))
    clock.t += 2.0
    assert bar.current() is not None

    clock.t += 1.0
    assert bar.current() is None


def test_snackbar_new_message_replaces_and_restarts_timer() -> None:
    clock = Ticker()
    bar = Snackbar(clock=clock)

    bar.notify(notification_for(TaskEvent.ADDED))
    clock.t += 2.0
    bar.notify(notification_for(TaskEvent.DELETED))
    clock.t += 2.0

    current = bar.current()
    assert current is not None
    assert current.event == TaskEvent.DELETED

    bar.dismiss()
    assert bar.current() is None


def test_fanout_isolates_failing_sink() -> None:
    class Broken:
        def notify(self, notification) -> None:
            raise RuntimeError("boom")

    before = RecordingNotifier()
    after = RecordingNotifier()
    fan = FanoutNotifier(before, Broken(), after)

    fan.notify(notification_for(TaskEvent.UPDATED))

    assert before.events == [TaskEvent.UPDATED]
    assert after.events == [TaskEvent.UPDATED]
