# src/tasklist_store/storage/layout.py

"""
On-disk layout of one task list.

    <root>/TaskList.txt         marker (Title:...)
    <root>/Tasks/<Guid>.txt     header + note paragraphs
    <root>/States/<Guid>.txt    Later | Soon | Now
    <root>/Ordering/<Guid>.txt  signed integer ticks
    <root>/Files/Info.txt       attachment ledger
    <root>/Files/...            attachment payloads
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

logger = logging.getLogger(__name__)

MARKER_FILE = "TaskList.txt"
TASKS_DIR = "Tasks"
STATES_DIR = "States"
ORDERING_DIR = "Ordering"
FILES_DIR = "Files"
LEDGER_FILE = "Info.txt"
RECORD_SUFFIX = ".txt"


def is_task_list_root(path: str | Path) -> bool:
    return (Path(path) / MARKER_FILE).is_file()


def find_task_lists(parent: str | Path) -> list[Path]:
    """Immediate subdirectories of parent that carry the marker file, sorted by name."""
    p = Path(parent)
    if not p.is_dir():
        return []
    return sorted(d for d in p.iterdir() if d.is_dir() and is_task_list_root(d))


@dataclass(frozen=True, slots=True)
class TaskListLayout:
    root: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))

    # ---- directories ----

    @property
    def marker_path(self) -> Path:
        return self.root / MARKER_FILE

    @property
    def tasks_dir(self) -> Path:
        return self.root / TASKS_DIR

    @property
    def states_dir(self) -> Path:
        return self.root / STATES_DIR

    @property
    def ordering_dir(self) -> Path:
        return self.root / ORDERING_DIR

    @property
    def files_dir(self) -> Path:
        return self.root / FILES_DIR

    @property
    def ledger_path(self) -> Path:
        return self.files_dir / LEDGER_FILE

    # ---- per-record paths ----

    @staticmethod
    def record_name(guid: UUID) -> str:
        return f"{guid}{RECORD_SUFFIX}"

    def task_path(self, guid: UUID) -> Path:
        return self.tasks_dir / self.record_name(guid)

    def state_path(self, guid: UUID) -> Path:
        return self.states_dir / self.record_name(guid)

    def ordering_path(self, guid: UUID) -> Path:
        return self.ordering_dir / self.record_name(guid)

    def attachment_path(self, relative_path: str) -> Path:
        return self.files_dir.joinpath(*relative_path.split("/"))

    # ---- root handling ----

    def is_root(self) -> bool:
        return is_task_list_root(self.root)

    def initialize(self, title: str) -> None:
        """Make root a task list: write the marker if missing and create the subtrees."""
        self.root.mkdir(parents=True, exist_ok=True)
        if not self.marker_path.exists():
            self.marker_path.write_bytes(f"Title:{title}\r\n".encode("utf-8"))
            logger.info("Initialized task list root=%s", self.root)
        for d in (self.tasks_dir, self.states_dir, self.ordering_dir, self.files_dir):
            d.mkdir(parents=True, exist_ok=True)
