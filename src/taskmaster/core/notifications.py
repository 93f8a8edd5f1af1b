# src/taskmaster/core/notifications.py

"""
Outbound status events.

The task store emits a Notification for every user-visible mutation
(add/delete/update/reorder) and for failed saves; the theme intent reports
its own failed writes. How they are shown is up to
the connector; Snackbar keeps the single "currently displayed" message with
the same replace-and-auto-dismiss behaviour as a GUI snackbar.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from .ports import NotificationSink

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_SECONDS = 3.0


class Severity(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class TaskEvent(StrEnum):
    ADDED = "added"
    DELETED = "deleted"
    UPDATED = "updated"
    REORDERED = "reordered"
    SAVE_FAILED = "save_failed"
    PREFERENCES_SAVE_FAILED = "preferences_save_failed"


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    severity: Severity
    event: TaskEvent
    duration_seconds: float = DEFAULT_DISPLAY_SECONDS


# Message/severity per event, as shown to the user.
EVENT_MESSAGES: dict[TaskEvent, tuple[str, Severity]] = {
    TaskEvent.ADDED: ("Task added successfully", Severity.SUCCESS),
    TaskEvent.DELETED: ("Task deleted", Severity.INFO),
    TaskEvent.UPDATED: ("Task updated successfully", Severity.SUCCESS),
    TaskEvent.REORDERED: ("Task order updated", Severity.INFO),
    TaskEvent.SAVE_FAILED: ("Failed to save tasks", Severity.ERROR),
    TaskEvent.PREFERENCES_SAVE_FAILED: ("Failed to save preferences", Severity.ERROR),
}


def notification_for(event: TaskEvent, *, duration_seconds: float = DEFAULT_DISPLAY_SECONDS) -> Notification:
    message, severity = EVENT_MESSAGES[event]
    return Notification(message=message, severity=severity, event=event, duration_seconds=duration_seconds)


class NullNotifier:
    def notify(self, notification: Notification) -> None:
        return


class FanoutNotifier:
    """Deliver to several sinks; one failing sink does not affect the others."""

    def __init__(self, *sinks: NotificationSink) -> None:
        self._sinks = list(sinks)

    def notify(self, notification: Notification) -> None:
        for sink in self._sinks:
            try:
                sink.notify(notification)
            except Exception:
                logger.exception("Notification sink %r failed", sink)


class Snackbar:
    """
    Single-slot notification holder.

    - a new notification replaces the current one
    - current() returns None once duration_seconds have elapsed
    - dismiss() clears it immediately
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._current: Notification | None = None
        self._shown_at = 0.0

    def notify(self, notification: Notification) -> None:
        self._current = notification
        self._shown_at = self._clock()

    def current(self) -> Notification | None:
        if self._current is None:
            return None
        if self._clock() - self._shown_at >= self._current.duration_seconds:
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None
