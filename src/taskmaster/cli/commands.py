# src/taskmaster/cli/commands.py

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import datetime

from ..core.errors import NotFoundError, ValidationError
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Priority, Task, describe_criteria
from ..tasks.task_view import visible_count

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

MIN_ID_PREFIX = 4
SHORT_ID_LEN = 8


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Engine errors (TaskError) propagate; the connector decides how to show them.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Any other text is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def resolve_task_id(state: AppState, token: str) -> str:
    """
    Accept a full id or a unique prefix of at least MIN_ID_PREFIX characters.
    """
    token = token.strip()
    if token in state.store:
        return token
    if len(token) < MIN_ID_PREFIX:
        raise NotFoundError(token)
    matches = [t.id for t in state.store.tasks() if t.id.startswith(token)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValidationError(f"Ambiguous task id prefix {token!r} ({len(matches)} matches)")
    raise NotFoundError(token)


def format_date(dt: datetime) -> str:
    local = dt.astimezone()
    return f"{local:%b} {local.day}, {local.year}"


_PRIORITY_COLORS = {
    # (light, dark)
    Priority.HIGH: ("31", "91"),
    Priority.MEDIUM: ("33", "93"),
    Priority.LOW: ("32", "92"),
}


def _paint_priority(state: AppState, priority: Priority) -> str:
    if not getattr(state.settings, "console_color", False) or not sys.stdout.isatty():
        return priority.value
    light, dark = _PRIORITY_COLORS[priority]
    code = dark if state.dark_mode else light
    return f"\033[{code}m{priority.value}\033[0m"


def format_task_line(state: AppState, position: int, task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    prio = _paint_priority(state, task.priority)
    return f"{position:>3}. {box} {task.id[:SHORT_ID_LEN]}  {task.text}  ({prio}, {format_date(task.created_at)})"


def _usage(text: str) -> str:
    return f"Usage: {text}"


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage("/add <text>")
    task = task_api.add_task(state, " ".join(args))
    return f"Added {task.id[:SHORT_ID_LEN]}: {task.text}"


def cmd_list(state: AppState, args: list[str]) -> str:
    if len(state.store) == 0:
        return "No tasks yet. Add your first task!"

    view = task_api.visible_tasks(state)
    lines = [f"Your Tasks ({visible_count(state.store.tasks(), state.criteria)})  [{describe_criteria(state.criteria)}]"]
    if not view:
        lines.append("  (no tasks match the current filter)")
    for i, task in enumerate(view, start=1):
        lines.append(format_task_line(state, i, task))
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/done <id>")
    task = task_api.toggle_task_completion(state, resolve_task_id(state, args[0]))
    return f"{task.id[:SHORT_ID_LEN]} marked {'completed' if task.completed else 'active'}."


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return _usage("/edit <id> <new text>")
    task = task_api.open_edit_form(state, resolve_task_id(state, args[0]))
    updated = task_api.save_edited_task(state, task.id, text=" ".join(args[1:]))
    return f"{updated.id[:SHORT_ID_LEN]}: {updated.text}"


def cmd_prio(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return _usage("/prio <id> <low|medium|high>")
    task = task_api.open_edit_form(state, resolve_task_id(state, args[0]))
    updated = task_api.save_edited_task(state, task.id, priority=args[1])
    return f"{updated.id[:SHORT_ID_LEN]} priority: {updated.priority.value}"


def cmd_del(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/del <id>")
    task_id = resolve_task_id(state, args[0])
    task_api.delete_task(state, task_id)
    return f"Deleted {task_id[:SHORT_ID_LEN]}."


def cmd_move(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return _usage("/move <id> <target-id>")
    active_id = resolve_task_id(state, args[0])
    over_id = resolve_task_id(state, args[1])
    if not task_api.handle_drag_end(state, active_id, over_id):
        return "Order unchanged."
    return f"Moved {active_id[:SHORT_ID_LEN]} to position {state.store.index_of(active_id) + 1}."


def cmd_filter(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/filter <all|active|completed>")
    task_api.set_filter_status(state, args[0])
    return describe_criteria(state.criteria)


def cmd_sort(state: AppState, args: list[str]) -> str:
    if not 1 <= len(args) <= 2:
        return _usage("/sort <date|priority> [asc|desc]")
    task_api.set_sort_by(state, args[0])
    if len(args) == 2:
        task_api.set_sort_direction(state, args[1])
    return describe_criteria(state.criteria)


def cmd_dir(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/dir <asc|desc>")
    task_api.set_sort_direction(state, args[0])
    return describe_criteria(state.criteria)


def cmd_theme(state: AppState, args: list[str]) -> str:
    """
    /theme       -> toggle
    /theme on    -> dark mode
    /theme off   -> light mode
    """
    if not args:
        enabled = task_api.toggle_dark_mode(state)
    else:
        arg = args[0].lower()
        if arg in ("on", "dark", "1", "true", "yes"):
            enabled = task_api.set_dark_mode(state, True)
        elif arg in ("off", "light", "0", "false", "no"):
            enabled = task_api.set_dark_mode(state, False)
        else:
            return _usage("/theme [on|off]")
    return f"Dark mode {'ON' if enabled else 'OFF'}."


def cmd_status(state: AppState, args: list[str]) -> str:
    counts = state.store.counts()
    store_path = getattr(state.settings, "store_path", "?")
    notice = state.snackbar.current()
    lines = [
        "Status:",
        f"  Tasks: {counts.total} ({counts.active} active, {counts.completed} completed)",
        f"  View: {describe_criteria(state.criteria)}",
        f"  Dark mode: {'ON' if state.dark_mode else 'OFF'}",
        f"  Store: {store_path}",
    ]
    if notice is not None:
        lines.append(f"  Notice: [{notice.severity.value.upper()}] {notice.message}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register("list", cmd_list, help_text="Show tasks using the current filter/sort.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Change text: /edit <id> <new text>.")
registry.register("prio", cmd_prio, help_text="Change priority: /prio <id> <low|medium|high>.")
registry.register("del", cmd_del, help_text="Delete a task: /del <id>.", aliases=["rm"])
registry.register("move", cmd_move, help_text="Move a task to another task's position: /move <id> <target-id>.")
registry.register("filter", cmd_filter, help_text="Filter: /filter all | active | completed.")
registry.register("sort", cmd_sort, help_text="Sort: /sort date|priority [asc|desc].")
registry.register("dir", cmd_dir, help_text="Sort direction: /dir asc | desc.")
registry.register("theme", cmd_theme, help_text="Dark mode: /theme [on|off].")
registry.register("status", cmd_status, help_text="Show task counts, view and storage info.")
