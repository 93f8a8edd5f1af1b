# src/taskmaster/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_models import ViewCriteria
from ..tasks.task_store import TaskStore
from ..tasks.task_view import CachedProjector
from .notifications import NullNotifier, Snackbar
from .ports import NotificationSink, PreferencePort


@dataclass
class AppState:
    """
    Session-scoped state around the engine.

    The task store is the only owner of task data. View criteria and the
    theme flag are session/UI concerns; the store never reads them.
    """

    settings: Any
    store: TaskStore
    preferences: PreferencePort
    snackbar: Snackbar
    # same sink the store emits through (snackbar + connector sinks)
    notifier: NotificationSink = field(default_factory=NullNotifier)

    dark_mode: bool = False
    criteria: ViewCriteria = field(default_factory=ViewCriteria)
    projector: CachedProjector = field(default_factory=CachedProjector)
