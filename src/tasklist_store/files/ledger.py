# src/tasklist_store/files/ledger.py

"""
Attachment ledger (Files/Info.txt).

INI-like, append-only:

    [report.pdf]
    Guid:5f0c...
    ParentGuid:
    AttachedAt:2024-05-01T10:20:30.1234560Z
    ModifiedAt:2024-04-30T08:00:00.0000000Z

A later section with the same Guid and a Deleted key is a tombstone: the
attachment is hidden from listings but the payload file stays on disk.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from ..core.clock import format_round_trip, parse_round_trip
from ..core.errors import LedgerFormatError
from ..text.paragraphs import parse_field_line, split_lines
from .file_models import FileAttachment

logger = logging.getLogger(__name__)

NEWLINE = "\r\n"

K_GUID = "Guid"
K_PARENT = "ParentGuid"
K_ATTACHED = "AttachedAt"
K_MODIFIED = "ModifiedAt"
K_DELETED = "Deleted"


@dataclass(slots=True)
class LedgerSection:
    path: str
    fields: dict[str, str] = field(default_factory=dict)
    line_no: int = 0

    @property
    def is_tombstone(self) -> bool:
        return K_DELETED in self.fields


def _section_header(line: str) -> str | None:
    s = line.strip()
    if len(s) >= 2 and s.startswith("[") and s.endswith("]"):
        return s[1:-1]
    return None


def parse_ledger(text: str | None) -> list[LedgerSection]:
    """
    Split ledger text into sections, in file order.

    Blank lines are skipped; property lines use the key-value rules of task
    files (lines without a usable colon are ignored). Content before the
    first [path] header is a LedgerFormatError.
    """
    sections: list[LedgerSection] = []
    current: LedgerSection | None = None

    for no, line in enumerate(split_lines(text or ""), start=1):
        if not line.strip():
            continue

        header = _section_header(line)
        if header is not None:
            if current is not None:
                sections.append(current)
            current = LedgerSection(path=header, line_no=no)
            continue

        if current is None:
            raise LedgerFormatError(f"line {no}: property outside of a section")

        kv = parse_field_line(line)
        if kv is not None:
            current.fields[kv[0]] = kv[1]

    if current is not None:
        sections.append(current)
    return sections


def _section_guid(section: LedgerSection) -> UUID:
    raw = (section.fields.get(K_GUID) or "").strip()
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise LedgerFormatError(
            f"section [{section.path}] line {section.line_no}: invalid {K_GUID} {raw!r}"
        ) from None


def _section_time(section: LedgerSection, key: str, guid: UUID) -> datetime:
    raw = section.fields.get(key)
    try:
        return parse_round_trip(raw or "")
    except ValueError:
        raise LedgerFormatError(
            f"section [{section.path}]: invalid {key} {raw!r}", guid=guid
        ) from None


def section_to_attachment(section: LedgerSection) -> FileAttachment:
    if not section.path.strip():
        raise LedgerFormatError(f"line {section.line_no}: empty section path")

    guid = _section_guid(section)

    raw_parent = (section.fields.get(K_PARENT) or "").strip()
    try:
        parent = uuid.UUID(raw_parent) if raw_parent else None
    except ValueError:
        raise LedgerFormatError(
            f"section [{section.path}]: invalid {K_PARENT} {raw_parent!r}", guid=guid
        ) from None

    return FileAttachment(
        guid=guid,
        relative_path=section.path,
        parent_guid=parent,
        attached_at=_section_time(section, K_ATTACHED, guid),
        modified_at=_section_time(section, K_MODIFIED, guid),
    )


def read_attachments(
    text: str | None,
    *,
    include_deleted: bool = False,
    strict: bool = False,
) -> list[FileAttachment]:
    """
    Attachments in ledger order, with tombstoned entries removed unless include_deleted.

    A malformed section is skipped and logged with its path and line; with
    strict=True the LedgerFormatError is raised instead.
    """
    sections = parse_ledger(text)

    deleted: set[UUID] = set()
    out: list[FileAttachment] = []
    for s in sections:
        try:
            if s.is_tombstone:
                deleted.add(_section_guid(s))
            else:
                out.append(section_to_attachment(s))
        except LedgerFormatError as e:
            if strict:
                raise
            logger.error("Skipping ledger section [%s] line %d: %s", s.path, s.line_no, e)

    if include_deleted:
        return out
    return [a for a in out if a.guid not in deleted]


def format_section(attachment: FileAttachment) -> str:
    lines = [
        f"[{attachment.relative_path}]",
        f"{K_GUID}:{attachment.guid}",
        f"{K_PARENT}:{attachment.parent_guid or ''}",
        f"{K_ATTACHED}:{format_round_trip(attachment.attached_at)}",
        f"{K_MODIFIED}:{format_round_trip(attachment.modified_at)}",
    ]
    return "".join(line + NEWLINE for line in lines)


def format_tombstone(attachment: FileAttachment, deleted_at: datetime) -> str:
    lines = [
        f"[{attachment.relative_path}]",
        f"{K_GUID}:{attachment.guid}",
        f"{K_DELETED}:{format_round_trip(deleted_at)}",
    ]
    return "".join(line + NEWLINE for line in lines)


def append_separator(existing: str) -> str:
    """What to write before a new section so it starts after one blank line."""
    if not existing:
        return ""
    if existing.endswith("\n\n") or existing.endswith("\r\n\r\n"):
        return ""
    if existing.endswith("\n"):
        return NEWLINE
    return NEWLINE + NEWLINE
