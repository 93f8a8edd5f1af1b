"""Personal task-list manager: task store, derived views, durable slots, console front-end."""

__version__ = "0.1.0"
