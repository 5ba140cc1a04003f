# src/todo_sync/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

APP_LOGGER_PREFIX = "todo_sync."

# Request/connection lines from the HTTP stack; the realtime stream makes them constant.
HTTP_LOGGERS = ("httpx", "httpcore")

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable: sync/store logs pass at the handler level,
    anything else (httpx, asyncio, py.warnings) only at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(APP_LOGGER_PREFIX):
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str | int | None, default: int = logging.INFO) -> int:
    """TODO_LOG_LEVEL value ("debug", "WARNING", 10) -> logging level."""
    if isinstance(name, int):
        return name
    if not name:
        return default
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(
    *,
    console_level: int = logging.INFO,
    log_dir: str | Path | None = None,
    log_file_name: str = "todo.log",
    file_level: int = logging.DEBUG,
    quiet_loggers: Iterable[str] = HTTP_LOGGERS,
) -> Path | None:
    """
    Replace the root handlers with a filtered stderr handler and, when
    `log_dir` is given, a full DEBUG log in `log_dir/log_file_name`.

    Returns the log file path (None for console-only). Call once, before the
    sync core starts.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    log_file: Path | None = None
    if log_dir is not None and log_file_name:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / log_file_name

        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_file
