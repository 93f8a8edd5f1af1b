# src/taskmaster/core/errors.py

"""
Error kinds raised by the task engine.

None of them is fatal: every failure leaves the task collection in its last
valid state. Connectors catch TaskError and show str(exc) to the user.
"""

from __future__ import annotations


class TaskError(Exception):
    """Base class for engine errors."""


class ValidationError(TaskError, ValueError):
    """Rejected input (empty text, unknown priority/filter/sort value)."""


class NotFoundError(TaskError, LookupError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class TaskIndexError(TaskError, IndexError):
    """Reorder target position outside [0, len)."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Target index {index} out of range (0..{length - 1})")
        self.index = index
        self.length = length


class PersistenceError(TaskError):
    """Durable storage could not be read or written."""
