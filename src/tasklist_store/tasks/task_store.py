# src/tasklist_store/tasks/task_store.py

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from pathlib import Path
from uuid import UUID

from ..core.clock import SystemClock, Uuid4Generator, to_ticks
from ..core.errors import (
    OperationCancelledError,
    StorageFormatError,
    TaskFormatError,
    TaskIdentityError,
    TaskNotFoundError,
)
from ..core.ports import Clock, FileSystem, IdGenerator
from ..storage.fs import LocalFileSystem
from ..storage.layout import TaskListLayout
from .ordering import reconcile_ordering
from .overrides import OverrideStore
from .task_codec import decode_task, encode_task
from .task_models import Note, Task, TaskState

logger = logging.getLogger(__name__)


class TaskListStore:
    """
    File-backed task store for one task-list directory.

    Storage:
    - Tasks/<Guid>.txt holds the task header and its notes,
    - States/ and Ordering/ hold the override values (see OverrideStore).

    Concurrency:
    - single writer per directory; no locking is done here
    - bulk loads can be interrupted between files via a threading.Event
    """

    def __init__(
        self,
        root: str | Path,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        fs: FileSystem | None = None,
        strict: bool = False,
    ) -> None:
        self._layout = TaskListLayout(Path(root))
        self._clock: Clock = clock or SystemClock()
        self._ids: IdGenerator = ids or Uuid4Generator()
        self._fs: FileSystem = fs or LocalFileSystem()
        self._overrides = OverrideStore(self._layout, self._fs)
        self._strict = strict
        logger.info("TaskListStore ready root=%s strict=%s", self._layout.root, strict)

    @property
    def layout(self) -> TaskListLayout:
        return self._layout

    @property
    def overrides(self) -> OverrideStore:
        return self._overrides

    def _now_ticks(self) -> int:
        return to_ticks(self._clock.now())

    # ---- reading ----

    def _decode_file(self, path: Path) -> Task:
        try:
            text = self._fs.read_text(path)
        except UnicodeDecodeError as e:
            raise TaskFormatError(f"not valid UTF-8: {e.reason}", path=path) from e
        try:
            return decode_task(text, file_stem=path.stem, overrides=self._overrides)
        except StorageFormatError as e:
            e.with_context(path=path)
            raise

    def load_tasks(
        self,
        *,
        include_done: bool = False,
        strict: bool | None = None,
        cancel: threading.Event | None = None,
    ) -> list[Task]:
        """
        Load every task of the list, reconcile unassigned orderings, return sorted.

        By default only active tasks (Later/Soon/Now) are returned.

        Per-record problems do not stop the enumeration:
        - Guid / file name mismatch: record skipped (always)
        - format errors: record skipped, or raised with path/Guid when strict
        I/O errors propagate.
        """
        strict = self._strict if strict is None else strict
        tasks: list[Task] = []
        skipped = 0

        for path in self._fs.list_files(self._layout.tasks_dir, "*.txt"):
            if cancel is not None and cancel.is_set():
                raise OperationCancelledError(f"load cancelled at {path}")

            try:
                task = self._decode_file(path)
            except TaskIdentityError as e:
                logger.warning("Skipping task record: %s", e)
                skipped += 1
                continue
            except StorageFormatError as e:
                if strict:
                    raise
                logger.error("Skipping unreadable task record: %s", e)
                skipped += 1
                continue

            if include_done or task.state.is_active:
                tasks.append(task)

        result = reconcile_ordering(tasks, now_ticks=self._now_ticks())
        logger.debug(
            "Loaded tasks root=%s count=%d skipped=%d special=%d",
            self._layout.root,
            len(result),
            skipped,
            sum(1 for t in result if t.is_special),
        )
        return result

    def load_task(self, guid: UUID) -> Task | None:
        """
        Load one task by id. Returns None if the file is missing or belongs to another Guid.

        The ordering is returned as stored (no reconciliation).
        """
        path = self._layout.task_path(guid)
        if not self._fs.is_file(path):
            return None
        try:
            return self._decode_file(path)
        except TaskIdentityError as e:
            logger.warning("Task record does not match its file name: %s", e)
            return None

    def _load_for_update(self, guid: UUID) -> Task:
        task = self.load_task(guid)
        if task is None:
            raise TaskNotFoundError(f"task {guid} not found in {self._layout.root}")
        if task.has_unassigned_ordering:
            # Take the position the list view shows, so updating persists it.
            # Terminal tasks are not in that view; they reconcile against the full list.
            view = self.load_tasks(include_done=not task.state.is_active, strict=False)
            for t in view:
                if t.guid == guid:
                    return t
        return task

    # ---- writing ----

    def _write(self, task: Task) -> Task:
        self._fs.write_text(self._layout.task_path(task.guid), encode_task(task))
        self._overrides.write_state(task.guid, task.state)
        self._overrides.write_ordering(task.guid, task.ordering_utc)
        return replace(task, is_special=False)

    def new_task(
        self,
        content: str,
        *,
        state: TaskState = TaskState.LATER,
        repeated_guid: UUID | None = None,
        ordering_utc: int | None = None,
    ) -> Task:
        """Build and persist a new task with a fresh Guid and creation time."""
        now = self._now_ticks()
        task = Task(
            guid=self._ids.new_id(),
            creation_utc=now,
            content=content,
            state=state,
            handling_utc=None if state.is_active else now,
            repeated_guid=repeated_guid,
            ordering_utc=now if ordering_utc is None else ordering_utc,
        )
        return self.create_task(task)

    def create_task(self, task: Task) -> Task:
        path = self._layout.task_path(task.guid)
        if self._fs.exists(path):
            raise FileExistsError(f"task {task.guid} already exists: {path}")
        saved = self._write(task)
        logger.info("Task created guid=%s state=%s", task.guid, task.state.value)
        return saved

    def update_task(self, task: Task) -> Task:
        """Rewrite the task file and both overrides (ordering is always written)."""
        if not self._fs.is_file(self._layout.task_path(task.guid)):
            raise TaskNotFoundError(f"task {task.guid} not found in {self._layout.root}")
        saved = self._write(task)
        logger.debug(
            "Task updated guid=%s state=%s ordering=%s",
            task.guid,
            task.state.value,
            task.ordering_utc,
        )
        return saved

    def set_state(self, guid: UUID, state: TaskState) -> Task:
        """Change state; HandlingUtc is stamped for Done/Cancelled and cleared otherwise."""
        task = self._load_for_update(guid)
        task.state = state
        task.handling_utc = None if state.is_active else self._now_ticks()
        return self.update_task(task)

    def delete_task(self, guid: UUID) -> bool:
        """Remove the task file and its overrides. Attachments are left alone."""
        removed = self._fs.delete(self._layout.task_path(guid))
        self._overrides.delete(guid)
        if removed:
            logger.info("Task deleted guid=%s", guid)
        return removed

    # ---- notes (always rewrite the owning task file) ----

    def add_note(self, task_guid: UUID, content: str) -> Note:
        task = self._load_for_update(task_guid)
        note = Note(guid=self._ids.new_id(), creation_utc=self._now_ticks(), content=content)
        task.notes.append(note)
        task.sort_notes()
        self.update_task(task)
        return note

    def update_note(self, task_guid: UUID, note_guid: UUID, content: str) -> Note:
        task = self._load_for_update(task_guid)
        for note in task.notes:
            if note.guid == note_guid:
                note.content = content
                self.update_task(task)
                return note
        raise TaskNotFoundError(f"note {note_guid} not found in task {task_guid}")

    def delete_note(self, task_guid: UUID, note_guid: UUID) -> bool:
        task = self._load_for_update(task_guid)
        kept = [n for n in task.notes if n.guid != note_guid]
        if len(kept) == len(task.notes):
            return False
        task.notes = kept
        self.update_task(task)
        return True
