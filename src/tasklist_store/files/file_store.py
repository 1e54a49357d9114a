# src/tasklist_store/files/file_store.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from uuid import UUID

from ..core.clock import SystemClock, Uuid4Generator
from ..core.errors import AttachmentSlotsExhaustedError
from ..core.ports import Clock, FileSystem, IdGenerator
from ..storage.fs import LocalFileSystem
from ..storage.layout import LEDGER_FILE, TaskListLayout
from .file_models import FileAttachment
from .ledger import (
    NEWLINE,
    append_separator,
    format_section,
    format_tombstone,
    parse_ledger,
    read_attachments,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTACHMENT_SLOTS = 9999

_UNSET: Any = object()


class FileStore:
    """
    Attachment payloads under Files/ plus the append-only ledger Files/Info.txt.

    Payloads are copied (never moved) and never overwritten. A name conflict
    is resolved by trying numbered subfolders: report.pdf, 1/report.pdf,
    2/report.pdf, ... Nothing here deletes payload files.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        fs: FileSystem | None = None,
        max_attachment_slots: int = DEFAULT_MAX_ATTACHMENT_SLOTS,
        strict: bool = False,
    ) -> None:
        self._layout = TaskListLayout(Path(root))
        self._clock: Clock = clock or SystemClock()
        self._ids: IdGenerator = ids or Uuid4Generator()
        self._fs: FileSystem = fs or LocalFileSystem()
        self._max_slots = max(1, int(max_attachment_slots))
        self._strict = strict

    @property
    def layout(self) -> TaskListLayout:
        return self._layout

    def _read_ledger(self) -> str:
        path = self._layout.ledger_path
        if not self._fs.is_file(path):
            return ""
        return self._fs.read_text(path)

    def _append_ledger(self, block: str) -> None:
        path = self._layout.ledger_path
        self._fs.append_text(path, append_separator(self._read_ledger()) + block)

    # ---- listing ----

    def list_attachments(
        self,
        parent_guid: UUID | None = _UNSET,
        *,
        strict: bool | None = None,
    ) -> list[FileAttachment]:
        """
        Attachments in ledger order.

        parent_guid filters by owner; pass None for list-level attachments only.
        Without the argument every attachment is returned.
        Malformed sections are skipped, or raised as LedgerFormatError when strict.
        """
        strict = self._strict if strict is None else strict
        items = read_attachments(self._read_ledger(), strict=strict)
        if parent_guid is _UNSET:
            return items
        return [a for a in items if a.parent_guid == parent_guid]

    def get_attachment(self, guid: UUID) -> FileAttachment | None:
        for att in self.list_attachments():
            if att.guid == guid:
                return att
        return None

    def payload_path(self, attachment: FileAttachment) -> Path:
        return self._layout.attachment_path(attachment.relative_path)

    # ---- attach ----

    def _candidates(self, name: str) -> Iterator[str]:
        if name.casefold() != LEDGER_FILE.casefold():
            yield name
        for i in range(1, self._max_slots + 1):
            yield f"{i}/{name}"

    def _is_taken(self, relative_path: str) -> bool:
        target = self._layout.attachment_path(relative_path)
        if self._fs.exists(target):
            return True
        # "1/x" is impossible when a plain file named "1" sits in Files/.
        parent = target.parent
        return parent != self._layout.files_dir and self._fs.is_file(parent)

    def attach(self, source: str | Path, parent_guid: UUID | None = None) -> FileAttachment:
        """
        Copy source into Files/ under a free name and append a ledger section.

        Raises AttachmentSlotsExhaustedError when every numbered subfolder is taken.
        Errors reading the source propagate.
        """
        src = Path(source)
        name = src.name
        if not name:
            raise ValueError(f"not a file path: {source!r}")

        modified_at = self._fs.modified_at(src)

        for rel in self._candidates(name):
            if self._is_taken(rel):
                continue
            try:
                self._fs.copy_exclusive(src, self._layout.attachment_path(rel))
            except (FileExistsError, NotADirectoryError):
                logger.debug("Attachment target taken concurrently: %s", rel)
                continue

            attachment = FileAttachment(
                guid=self._ids.new_id(),
                relative_path=rel,
                parent_guid=parent_guid,
                attached_at=self._clock.now(),
                modified_at=modified_at,
            )
            self._append_ledger(format_section(attachment))
            logger.info(
                "File attached guid=%s path=%s parent=%s", attachment.guid, rel, parent_guid
            )
            return attachment

        raise AttachmentSlotsExhaustedError(
            f"no free slot for {name!r} after {self._max_slots} numbered folders"
        )

    # ---- ledger maintenance ----

    def detach(self, guid: UUID) -> bool:
        """
        Hide an attachment by appending a tombstone section.

        The payload file and the original section are left untouched.
        """
        att = self.get_attachment(guid)
        if att is None:
            return False
        self._append_ledger(format_tombstone(att, self._clock.now()))
        logger.info("File detached guid=%s path=%s", guid, att.relative_path)
        return True

    def compact_ledger(self) -> int:
        """
        Rewrite the ledger without tombstoned entries. Returns the number of sections dropped.

        Explicit maintenance only; attach/detach never call this.
        Refuses (LedgerFormatError) while any section is malformed, so nothing
        unreadable is dropped silently.
        """
        text = self._read_ledger()
        if not text:
            return 0

        total = len(parse_ledger(text))
        kept = read_attachments(text, strict=True)
        dropped = total - len(kept)
        if dropped == 0:
            return 0

        body = NEWLINE.join(format_section(a) for a in kept)
        self._fs.write_text(self._layout.ledger_path, body)
        logger.info("Ledger compacted root=%s dropped=%d", self._layout.root, dropped)
        return dropped
