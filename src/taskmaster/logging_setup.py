# src/taskmaster/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "taskmaster.log"


class _OwnLogsFilter(logging.Filter):
    """Console shows taskmaster.* at the handler level; anything else (py.warnings included) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.partition(".")[0] == "taskmaster" or record.levelno >= logging.ERROR


def _handler(handler: logging.Handler, level: int, fmt: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskmaster",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route all logging to stderr (quiet, filtered, so it does not clutter the
    task> prompt) and to <log_dir>/taskmaster.log (everything).

    Replaces any handlers already on the root logger. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    console = _handler(logging.StreamHandler(sys.stderr), console_level, fmt)
    console.addFilter(_OwnLogsFilter())

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(logging.DEBUG)
    root.addHandler(console)
    root.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, fmt))

    logging.captureWarnings(True)
    return log_file
