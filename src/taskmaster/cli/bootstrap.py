# src/taskmaster/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires slot store -> persistence -> task store -> AppState,
- restores the theme preference.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.errors import PersistenceError
from ..core.notifications import FanoutNotifier, Snackbar
from ..core.ports import NotificationSink, SlotStore
from ..core.state import AppState
from ..storage.persistence import TaskPersistence
from ..storage.slot_store import MemorySlotStore, SqliteSlotStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def open_slot_store(settings) -> SlotStore:
    try:
        return SqliteSlotStore(settings.store_path)
    except PersistenceError:
        # Keep the app usable for this session; nothing will survive a restart.
        logger.exception("Cannot open %s; using in-memory storage for this session.", settings.store_path)
        return MemorySlotStore()


def create_initial_state(
    *,
    settings=None,
    slots: SlotStore | None = None,
    sinks: list[NotificationSink] | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the slot store) injectable makes the app easier to test
    and avoids hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if slots is None:
        slots = open_slot_store(settings)

    persistence = TaskPersistence(slots)
    snackbar = Snackbar()
    notifier = FanoutNotifier(snackbar, *(sinks or []))

    store = TaskStore(
        persistence,
        notifier,
        notify_seconds=float(getattr(settings, "notify_seconds", 3.0)),
    )

    return AppState(
        settings=settings,
        store=store,
        preferences=persistence,
        snackbar=snackbar,
        notifier=notifier,
        dark_mode=persistence.load_dark_mode(),
    )
