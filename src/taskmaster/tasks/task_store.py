# src/taskmaster/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from ..core.errors import NotFoundError, PersistenceError, TaskIndexError, ValidationError
from ..core.notifications import DEFAULT_DISPLAY_SECONDS, NullNotifier, TaskEvent, notification_for
from ..core.ports import NotificationSink, TaskPersistencePort
from .task_models import Priority, Task, TaskCounts

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class TaskStore:
    """
    Owner of the ordered task collection.

    - every mutation validates first, then swaps in a new list (no partial state)
    - every successful mutation is saved before the method returns (write-through)
    - add/delete/update/reorder emit a notification; toggle is silent
    - a failed save is reported through the notifier; memory stays authoritative

    Order is user-controlled: new tasks are appended, reorder() moves them.
    """

    def __init__(
        self,
        persistence: TaskPersistencePort,
        notifier: NotificationSink | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
        notify_seconds: float = DEFAULT_DISPLAY_SECONDS,
    ) -> None:
        self._persistence = persistence
        self._notifier: NotificationSink = notifier or NullNotifier()
        self._clock = clock
        self._id_factory = id_factory
        self._notify_seconds = float(notify_seconds)
        self._tasks: list[Task] = list(persistence.load_tasks())
        self._version = 0
        logger.info("TaskStore ready total=%d", len(self._tasks))

    # ---- read API ----

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(t.id == task_id for t in self._tasks)

    @property
    def version(self) -> int:
        """Bumped on every successful mutation."""
        return self._version

    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def find(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def get(self, task_id: str) -> Task:
        task = self.find(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFoundError(task_id)

    def counts(self) -> TaskCounts:
        done = sum(1 for t in self._tasks if t.completed)
        return TaskCounts(total=len(self._tasks), active=len(self._tasks) - done, completed=done)

    # ---- internals ----

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        # Millisecond precision so created_at survives the ISO round-trip unchanged.
        return now.replace(microsecond=(now.microsecond // 1000) * 1000)

    def _allocate_id(self) -> str:
        while True:
            task_id = self._id_factory()
            if task_id not in self:
                return task_id
            logger.warning("Id factory returned an id already in use (%s); retrying", task_id)

    def _emit(self, event: TaskEvent) -> None:
        try:
            self._notifier.notify(notification_for(event, duration_seconds=self._notify_seconds))
        except Exception:
            logger.exception("Notifier failed for event=%s", event.value)

    def _commit(self, new_tasks: list[Task], event: TaskEvent | None) -> None:
        self._tasks = new_tasks
        self._version += 1
        try:
            self._persistence.save_tasks(self._tasks)
        except PersistenceError:
            logger.exception("Saving tasks failed; keeping in-memory state (total=%d)", len(self._tasks))
            self._emit(TaskEvent.SAVE_FAILED)
        if event is not None:
            self._emit(event)

    @staticmethod
    def _clean_text(text: str | None) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise ValidationError("Task text must not be empty")
        return cleaned

    # ---- mutations ----

    def create(self, text: str) -> Task:
        cleaned = self._clean_text(text)
        task = Task(id=self._allocate_id(), text=cleaned, created_at=self._now())
        self._commit([*self._tasks, task], TaskEvent.ADDED)
        logger.debug("Task added id=%s", task.id)
        return task

    def delete(self, task_id: str) -> bool:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            logger.debug("delete: no task id=%s", task_id)
            return False
        self._commit(remaining, TaskEvent.DELETED)
        logger.debug("Task deleted id=%s", task_id)
        return True

    def update(
        self,
        task_id: str,
        *,
        text: str | None = None,
        priority: Priority | str | None = None,
    ) -> Task:
        idx = self.index_of(task_id)
        current = self._tasks[idx]

        new_text = current.text if text is None else self._clean_text(text)
        if priority is None:
            new_priority = current.priority
        elif isinstance(priority, Priority):
            new_priority = priority
        else:
            new_priority = Priority.parse(priority)

        updated = replace(current, text=new_text, priority=new_priority)
        new_tasks = list(self._tasks)
        new_tasks[idx] = updated
        self._commit(new_tasks, TaskEvent.UPDATED)
        logger.debug("Task updated id=%s priority=%s", task_id, new_priority.value)
        return updated

    def toggle_completion(self, task_id: str) -> Task:
        idx = self.index_of(task_id)
        current = self._tasks[idx]
        toggled = replace(current, completed=not current.completed)
        new_tasks = list(self._tasks)
        new_tasks[idx] = toggled
        self._commit(new_tasks, None)
        logger.debug("Task toggled id=%s completed=%s", task_id, toggled.completed)
        return toggled

    def reorder(self, task_id: str, target_index: int) -> bool:
        """
        Move a task to an absolute position of the full stored sequence.

        The task is removed and re-inserted at target_index; tasks in between
        shift by one. Returns False if it already sits there.
        """
        source = self.index_of(task_id)
        n = len(self._tasks)
        if not 0 <= target_index < n:
            raise TaskIndexError(target_index, n)
        if source == target_index:
            return False

        new_tasks = list(self._tasks)
        moved = new_tasks.pop(source)
        new_tasks.insert(target_index, moved)
        self._commit(new_tasks, TaskEvent.REORDERED)
        logger.debug("Task moved id=%s %d -> %d", task_id, source, target_index)
        return True

    def move_to(self, task_id: str, target_task_id: str) -> bool:
        """
        Move task_id to the position currently held by target_task_id.

        Positions are always those of the full store, never of a filtered view.
        """
        self.index_of(task_id)
        if task_id == target_task_id:
            return False
        return self.reorder(task_id, self.index_of(target_task_id))
