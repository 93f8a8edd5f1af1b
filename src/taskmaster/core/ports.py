# src/taskmaster/core/ports.py

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage and notification display swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from .notifications import Notification


class SlotStore(Protocol):
    """
    Durable key/value slots holding plain strings.

    Implementations raise PersistenceError on storage failures.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...


class NotificationSink(Protocol):
    """Where semantic status events go (console, snackbar, test recorder...)."""

    def notify(self, notification: Notification) -> None: ...


class TaskPersistencePort(Protocol):
    # Load never raises; malformed data degrades to an empty collection.
    def load_tasks(self) -> list[Task]: ...
    # Save raises PersistenceError; the store decides how to surface it.
    def save_tasks(self, tasks: Iterable[Task]) -> None: ...


class PreferencePort(Protocol):
    def load_dark_mode(self) -> bool: ...
    def save_dark_mode(self, value: bool) -> None: ...
