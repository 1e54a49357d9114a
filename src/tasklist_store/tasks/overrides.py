# src/tasklist_store/tasks/overrides.py

"""
Per-task override files.

States/<Guid>.txt    Later | Soon | Now  (no file for Done/Cancelled)
Ordering/<Guid>.txt  signed integer

These keep high-churn values out of Tasks/<Guid>.txt so that reordering or
switching between active states never touches the content file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import UUID

from ..core.ports import FileSystem
from ..storage.fs import LocalFileSystem
from ..storage.layout import TaskListLayout
from .task_codec import parse_ordering_override, parse_state_override
from .task_models import TaskState

logger = logging.getLogger(__name__)


class OverrideStore:
    """Implements the OverrideLookup port on top of the States/ and Ordering/ folders."""

    def __init__(self, layout: TaskListLayout, fs: FileSystem | None = None) -> None:
        self._layout = layout
        self._fs: FileSystem = fs or LocalFileSystem()

    def _read_optional(self, path: Path) -> str | None:
        if not self._fs.is_file(path):
            return None
        try:
            return self._fs.read_text(path)
        except UnicodeDecodeError:
            # Same as an unparseable value: fall back to the task file.
            logger.debug("Ignoring undecodable override file path=%s", path, exc_info=True)
            return None

    # ---- state ----

    def read_state(self, guid: UUID) -> TaskState | None:
        raw = self._read_optional(self._layout.state_path(guid))
        state = parse_state_override(raw)
        if raw is not None and state is None:
            logger.debug("Ignoring unparseable state override guid=%s raw=%r", guid, raw)
        return state

    def write_state(self, guid: UUID, state: TaskState) -> None:
        path = self._layout.state_path(guid)
        if state.is_active:
            self._fs.write_text(path, state.value)
        elif self._fs.delete(path):
            logger.debug("Removed state override guid=%s (state=%s)", guid, state.value)

    # ---- ordering ----

    def read_ordering(self, guid: UUID) -> int | None:
        raw = self._read_optional(self._layout.ordering_path(guid))
        value = parse_ordering_override(raw)
        if raw is not None and value is None:
            logger.debug("Ignoring unparseable ordering override guid=%s raw=%r", guid, raw)
        return value

    def write_ordering(self, guid: UUID, value: int) -> None:
        self._fs.write_text(self._layout.ordering_path(guid), str(int(value)))

    def delete(self, guid: UUID) -> None:
        self._fs.delete(self._layout.state_path(guid))
        self._fs.delete(self._layout.ordering_path(guid))
