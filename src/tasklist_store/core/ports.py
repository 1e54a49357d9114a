# src/tasklist_store/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the storage engine.

The engine depends on Protocols instead of concrete implementations.
This keeps time, identifiers and file access swappable and makes testing easier.
"""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol
from uuid import UUID

if TYPE_CHECKING:
    from ..tasks.task_models import TaskState


class Clock(Protocol):
    """Source of the current time (timezone-aware UTC)."""
    def now(self) -> datetime: ...


class IdGenerator(Protocol):
    def new_id(self) -> UUID: ...


class OverrideLookup(Protocol):
    """
    Decoder-side port: per-task override values, looked up by task identifier.

    Implementations return None for "absent" (missing file, unparseable content).
    """

    def read_state(self, guid: UUID) -> TaskState | None: ...
    def read_ordering(self, guid: UUID) -> int | None: ...


class FileSystem(Protocol):
    """Raw filesystem primitives the engine needs. Errors are OSError and propagate."""

    def exists(self, path: Path) -> bool: ...
    def is_file(self, path: Path) -> bool: ...
    def read_text(self, path: Path) -> str: ...
    def write_text(self, path: Path, text: str) -> None: ...
    def append_text(self, path: Path, text: str) -> None: ...
    def delete(self, path: Path) -> bool: ...
    def copy_exclusive(self, source: Path, target: Path) -> None: ...
    def modified_at(self, path: Path) -> datetime: ...
    def list_files(self, directory: Path, pattern: str = "*") -> Iterator[Path]: ...
