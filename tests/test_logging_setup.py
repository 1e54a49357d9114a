# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tasklist_store.logging_setup import _ConsoleFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.makeLogRecord({"name": name, "levelno": level, "msg": "m"})


@pytest.mark.parametrize(
    "name,level,shown",
    [
        ("tasklist_store.files.file_store", logging.INFO, False),
        ("tasklist_store.files.ledger", logging.ERROR, True),
        ("tasklist_store.tasks.task_store", logging.INFO, False),
        ("tasklist_store.tasks.task_store", logging.WARNING, True),
        ("tasklist_store.tasks.task_codec", logging.INFO, True),
        ("tasklist_store.filesystem", logging.INFO, True),
        ("tasklist_store", logging.INFO, True),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleFilter().filter(_record(name, level)) is shown


def test_verbose_console_shows_store_bookkeeping() -> None:
    f = _ConsoleFilter(verbose=True)
    assert f.filter(_record("tasklist_store.files.file_store", logging.DEBUG))
    assert not f.filter(_record("urllib3", logging.WARNING))


def test_setup_logging_writes_everything_to_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)
        logging.getLogger("tasklist_store.files.file_store").info("File attached guid=x")
        for h in root.handlers:
            h.flush()
        assert log_file == tmp_path / "logs" / "tasklist.log"
        assert "File attached guid=x" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
