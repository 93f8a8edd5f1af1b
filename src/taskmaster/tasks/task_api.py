# src/taskmaster/tasks/task_api.py

"""
Inbound UI intents.

Thin helpers that map what a front-end asks for (add, edit, drag, change the
filter...) onto the task store and the session state. Connectors call these
instead of reaching into AppState directly.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.errors import PersistenceError, ValidationError
from ..core.notifications import DEFAULT_DISPLAY_SECONDS, TaskEvent, notification_for
from ..core.state import AppState
from .task_models import FilterStatus, Priority, SortDirection, SortKey, Task

logger = logging.getLogger(__name__)


# ---- task intents ----


def add_task(state: AppState, text: str) -> Task:
    return state.store.create(text)


def delete_task(state: AppState, task_id: str) -> bool:
    return state.store.delete(task_id)


def toggle_task_completion(state: AppState, task_id: str) -> Task:
    return state.store.toggle_completion(task_id)


def open_edit_form(state: AppState, task_id: str) -> Task:
    """
    Return the task to be edited.

    Completed tasks are read-only in the edit form; reopen them first.
    """
    task = state.store.get(task_id)
    if task.completed:
        raise ValidationError("Completed tasks cannot be edited; mark the task active first")
    return task


def save_edited_task(
    state: AppState,
    task_id: str,
    *,
    text: str | None = None,
    priority: Priority | str | None = None,
) -> Task:
    return state.store.update(task_id, text=text, priority=priority)


def handle_drag_end(state: AppState, active_id: str, over_id: str | None) -> bool:
    """
    Drop `active_id` onto the slot held by `over_id`.

    Dropping outside any task (over_id=None) or onto itself does nothing.
    """
    if over_id is None or active_id == over_id:
        return False
    return state.store.move_to(active_id, over_id)


def visible_tasks(state: AppState) -> list[Task]:
    return state.projector.project(state.store, state.criteria)


# ---- view criteria ----


def set_filter_status(state: AppState, value: FilterStatus | str) -> FilterStatus:
    status = value if isinstance(value, FilterStatus) else FilterStatus.parse(value)
    state.criteria = replace(state.criteria, filter_status=status)
    return status


def set_sort_by(state: AppState, value: SortKey | str) -> SortKey:
    key = value if isinstance(value, SortKey) else SortKey.parse(value)
    state.criteria = replace(state.criteria, sort_key=key)
    return key


def set_sort_direction(state: AppState, value: SortDirection | str) -> SortDirection:
    direction = value if isinstance(value, SortDirection) else SortDirection.parse(value)
    state.criteria = replace(state.criteria, sort_direction=direction)
    return direction


# ---- theme preference ----


def set_dark_mode(state: AppState, enabled: bool) -> bool:
    """
    Switch theme and persist it.

    The session keeps the new value even if the write fails; the failure is
    reported through the session notifier.
    """
    state.dark_mode = bool(enabled)
    try:
        state.preferences.save_dark_mode(state.dark_mode)
    except PersistenceError:
        logger.exception("Saving dark mode preference failed")
        seconds = float(getattr(state.settings, "notify_seconds", DEFAULT_DISPLAY_SECONDS))
        state.notifier.notify(notification_for(TaskEvent.PREFERENCES_SAVE_FAILED, duration_seconds=seconds))
    return state.dark_mode


def toggle_dark_mode(state: AppState) -> bool:
    return set_dark_mode(state, not state.dark_mode)
