# src/taskmaster/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import TaskError
from ..core.notifications import Notification
from ..core.state import AppState
from ..tasks import task_api

logger = logging.getLogger(__name__)

PROMPT = "task> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleNotifier:
    """Print status events as one-line toasts."""

    def __init__(self, printer: Callable[[str], None] = _print_ts) -> None:
        self._printer = printer

    def notify(self, notification: Notification) -> None:
        self._printer(f"[{notification.severity.value.upper()}] {notification.message}")


def handle_line(state: AppState, line: str) -> str | None:
    """
    Process one line of user input.

    Slash commands go to the registry; any other text becomes a new task.
    Returns the text to show (None if nothing to show).
    """
    line = line.strip()
    if not line:
        return None

    try:
        reply = command_registry.handle(state, line)
        if reply is not None:
            return reply
        task = task_api.add_task(state, line)
        logger.debug("Console added task id=%s", task.id)
        return None
    except TaskError as e:
        logger.info("Rejected input %r: %s", line, e)
        return str(e)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store))
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(PROMPT)
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if user_input.strip().lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            print(reply)

    logger.info("Console connector finished.")
