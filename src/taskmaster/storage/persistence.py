# src/taskmaster/storage/persistence.py

"""
Task collection + theme preference <-> durable slots.

Slot "tasks" holds a JSON array of records in store order:
    {"id": str, "text": str, "completed": bool,
     "createdAt": "2024-05-01T10:00:00.000Z", "priority": "Low"|"Medium"|"High"}

Slot "darkMode" holds "true" or "false".

Loading is fail-open (bad data -> empty collection / light mode).
Saving raises PersistenceError.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from ..core.errors import PersistenceError
from ..core.ports import SlotStore
from ..tasks.task_models import Priority, Task

logger = logging.getLogger(__name__)

TASKS_SLOT = "tasks"
DARK_MODE_SLOT = "darkMode"


def format_timestamp(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "createdAt": format_timestamp(task.created_at),
        "priority": task.priority.value,
    }


def record_to_task(raw: Any) -> Task | None:
    """Best-effort decode of one stored record; None if it cannot be used."""
    if not isinstance(raw, dict):
        return None
    task_id = raw.get("id")
    text = raw.get("text")
    if not isinstance(task_id, str) or not task_id:
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    created_raw = raw.get("createdAt")
    if not isinstance(created_raw, str):
        return None
    completed = raw.get("completed", False)
    if not isinstance(completed, bool):
        return None
    try:
        created_at = parse_timestamp(created_raw)
    except (ValueError, OverflowError):
        # offsets can push year 1 / 9999 out of range when shifted to UTC
        return None
    return Task(
        id=task_id,
        text=text,
        created_at=created_at,
        completed=completed,
        priority=Priority.from_storage(raw.get("priority")),
    )


def dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False)


class TaskPersistence:
    """Persistence adapter over a SlotStore."""

    def __init__(self, slots: SlotStore) -> None:
        self._slots = slots

    # ---- tasks ----

    def load_tasks(self) -> list[Task]:
        try:
            raw = self._slots.get(TASKS_SLOT)
        except PersistenceError:
            logger.exception("Reading slot %r failed; starting with an empty task list.", TASKS_SLOT)
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Slot %r holds invalid JSON; starting with an empty task list.", TASKS_SLOT)
            return []

        if not isinstance(data, list):
            logger.warning("Slot %r is not a JSON array; starting with an empty task list.", TASKS_SLOT)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for i, item in enumerate(data):
            task = record_to_task(item)
            if task is None:
                logger.warning("Skipping malformed task record at position %d", i)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s at position %d", task.id, i)
                continue
            seen.add(task.id)
            out.append(task)

        logger.info("Loaded %d tasks", len(out))
        return out

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        payload = dump_tasks(tasks)
        self._slots.set(TASKS_SLOT, payload)

    # ---- theme preference ----

    def load_dark_mode(self) -> bool:
        try:
            raw = self._slots.get(DARK_MODE_SLOT)
        except PersistenceError:
            logger.exception("Reading slot %r failed; using light mode.", DARK_MODE_SLOT)
            return False
        return (raw or "").strip().lower() == "true"

    def save_dark_mode(self, value: bool) -> None:
        self._slots.set(DARK_MODE_SLOT, "true" if value else "false")
