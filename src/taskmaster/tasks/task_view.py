# src/taskmaster/tasks/task_view.py

"""
Derived, read-only views of the task collection.

project() filters by completion state and then stable-sorts by creation date
or priority. It never touches stored order; reorder() is the only way to
change that.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .task_models import FilterStatus, SortDirection, SortKey, Task, ViewCriteria
from .task_store import TaskStore


def _filter(tasks: Sequence[Task], status: FilterStatus) -> list[Task]:
    if status == FilterStatus.ACTIVE:
        return [t for t in tasks if not t.completed]
    if status == FilterStatus.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def _sort_key(key: SortKey) -> Callable[[Task], object]:
    if key == SortKey.PRIORITY:
        return lambda t: t.priority.rank
    return lambda t: t.created_at


def project(tasks: Sequence[Task], criteria: ViewCriteria) -> list[Task]:
    """
    Return a new filtered + sorted list.

    sorted() is stable, including with reverse=True, so tasks with equal keys
    keep their stored relative order in both directions.
    """
    filtered = _filter(tasks, criteria.filter_status)
    return sorted(
        filtered,
        key=_sort_key(criteria.sort_key),
        reverse=criteria.sort_direction == SortDirection.DESC,
    )


def visible_count(tasks: Sequence[Task], criteria: ViewCriteria) -> int:
    return len(_filter(tasks, criteria.filter_status))


class CachedProjector:
    """Memoises project() for one store until its version or the criteria change."""

    def __init__(self) -> None:
        self._store: TaskStore | None = None
        self._key: tuple[int, ViewCriteria] | None = None
        self._view: list[Task] = []

    def project(self, store: TaskStore, criteria: ViewCriteria) -> list[Task]:
        key = (store.version, criteria)
        if store is not self._store or key != self._key:
            self._view = project(store.tasks(), criteria)
            self._store = store
            self._key = key
        return list(self._view)
