# src/taskmaster/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..core.errors import ValidationError


def _parse_choice(cls, raw: str, aliases: dict[str, str]):
    key = (raw or "").strip().lower()
    key = aliases.get(key, key)
    for member in cls:
        if member.value.lower() == key:
            return member
    allowed = ", ".join(m.value for m in cls)
    raise ValidationError(f"Unknown {cls.__name__} value {raw!r} (expected one of: {allowed})")


class Priority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, raw: str) -> Priority:
        return _parse_choice(cls, raw, {"l": "low", "m": "medium", "med": "medium", "h": "high"})

    @classmethod
    def from_storage(cls, raw: object) -> Priority:
        """Lenient variant used when loading persisted data."""
        if not isinstance(raw, str):
            return cls.MEDIUM
        try:
            return cls.parse(raw)
        except ValidationError:
            return cls.MEDIUM


_PRIORITY_RANK = {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}


class FilterStatus(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str) -> FilterStatus:
        return _parse_choice(cls, raw, {"open": "active", "todo": "active", "done": "completed"})


class SortKey(StrEnum):
    DATE = "date"
    PRIORITY = "priority"

    @classmethod
    def parse(cls, raw: str) -> SortKey:
        return _parse_choice(cls, raw, {"created": "date", "prio": "priority"})


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str) -> SortDirection:
        return _parse_choice(cls, raw, {"ascending": "asc", "descending": "desc"})


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str
    created_at: datetime
    completed: bool = False
    priority: Priority = Priority.MEDIUM


@dataclass(frozen=True, slots=True)
class ViewCriteria:
    """
    Transient filter/sort selection for one session.

    Never written to task storage. Hashable so it can key a projection cache.
    """

    filter_status: FilterStatus = FilterStatus.ALL
    sort_key: SortKey = SortKey.DATE
    sort_direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    active: int
    completed: int


def describe_criteria(criteria: ViewCriteria) -> str:
    status = criteria.filter_status.value.capitalize()
    key = criteria.sort_key.value.capitalize()
    direction = criteria.sort_direction.value.capitalize()
    return f"Status: {status} | Sort: {key} ({direction})"
