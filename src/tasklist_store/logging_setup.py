# src/tasklist_store/logging_setup.py

"""
Logging for the tasklist-store command.

Command output goes to stdout; log records go to stderr and to a log file.
The stores log every attach, detach, create and delete at INFO, which the
command already echoes on stdout, so the console only shows those modules
from WARNING up (skipped records, unreadable ledger sections). The file
keeps everything.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "tasklist.log"

# Store modules whose INFO lines duplicate what the CLI prints.
_ECHOED_LOGGERS = (
    "tasklist_store.files",
    "tasklist_store.tasks.task_store",
)


def _under(name: str, prefix: str) -> bool:
    return name == prefix or name.startswith(prefix + ".")


class _ConsoleFilter(logging.Filter):
    """
    Console policy:
    - store bookkeeping (files, task_store) only at WARNING+, unless verbose
    - everything else from tasklist_store passes
    - other loggers, py.warnings included, only at ERROR+
    """

    def __init__(self, *, verbose: bool = False) -> None:
        super().__init__()
        self._verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if not _under(name, "tasklist_store"):
            return record.levelno >= logging.ERROR

        if self._verbose:
            return True

        if any(_under(name, p) for p in _ECHOED_LOGGERS):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasklist",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the stderr and file handlers on the root logger; returns the log file path.

    console_level=DEBUG lifts the bookkeeping filter as well.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(_ConsoleFilter(verbose=console_level <= logging.DEBUG))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
