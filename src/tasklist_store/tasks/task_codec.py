# src/tasklist_store/tasks/task_codec.py

"""
Task record codec.

One task file = paragraph 0 (task header) + one paragraph per note.

Two on-disk generations are read:
- legacy: State holds the real value, OrderingUtc is embedded in the header;
- current: State is "Active" for Later/Soon/Now and the live values sit in
  the override files (States/, Ordering/).

Only the current generation is written.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from uuid import UUID

from ..core.errors import StorageFormatError, TaskFormatError, TaskIdentityError
from ..core.ports import OverrideLookup
from ..text.escaping import escape, unescape
from ..text.paragraphs import parse_fields, split_paragraphs
from .task_models import UNASSIGNED_ORDERING, Note, Task, TaskState

logger = logging.getLogger(__name__)

TASK_FORMAT = "1"
ACTIVE_MARKER = "Active"
NEWLINE = "\r\n"

F_FORMAT = "Format"
F_GUID = "Guid"
F_CREATION = "CreationUtc"
F_CONTENT = "Content"
F_STATE = "State"
F_HANDLING = "HandlingUtc"
F_REPEATED = "RepeatedGuid"
F_ORDERING = "OrderingUtc"


@dataclass(frozen=True, slots=True)
class StaticOverrides:
    """
    Override values given as raw file text (or None when the file is absent).

    Lets the codec run without any filesystem; parsing follows OverrideStore.
    """

    state_text: str | None = None
    ordering_text: str | None = None

    def read_state(self, guid: UUID) -> TaskState | None:
        return parse_state_override(self.state_text)

    def read_ordering(self, guid: UUID) -> int | None:
        return parse_ordering_override(self.ordering_text)


NO_OVERRIDES = StaticOverrides()


# ---- override value parsing (shared with OverrideStore) ----

def parse_state_override(raw: str | None) -> TaskState | None:
    state = TaskState.parse(raw)
    if state is None or not state.is_active:
        return None
    return state


def parse_ordering_override(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


# ---- field resolution ----

def resolve_state(override: TaskState | None, embedded: str | None) -> TaskState:
    """
    override (active states only) -> embedded value -> Later.

    The "Active" marker and unknown embedded values both mean "no information".
    """
    if override is not None and override.is_active:
        return override

    if embedded is not None and embedded.strip() != ACTIVE_MARKER:
        parsed = TaskState.parse(embedded)
        if parsed is not None:
            return parsed
        logger.debug("Unknown embedded state %r; using default", embedded)

    return TaskState.LATER


def resolve_ordering(override: int | None, embedded: str | None) -> int:
    """override -> embedded OrderingUtc -> unassigned sentinel."""
    if override is not None:
        return override
    if embedded is not None:
        try:
            return int(embedded.strip())
        except ValueError:
            logger.debug("Unparseable embedded ordering %r; using sentinel", embedded)
    return UNASSIGNED_ORDERING


def storage_state(state: TaskState) -> str:
    return ACTIVE_MARKER if state.is_active else state.value


# ---- decode ----

def _required(fields: dict[str, str], key: str, what: str) -> str:
    value = fields.get(key)
    if value is None or value == "":
        raise TaskFormatError(f"{what}: missing {key}")
    return value


def _parse_guid(raw: str, key: str, what: str) -> UUID:
    try:
        return uuid.UUID(raw.strip())
    except ValueError:
        raise TaskFormatError(f"{what}: invalid {key} {raw!r}") from None


def _parse_ticks(raw: str, key: str, what: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        raise TaskFormatError(f"{what}: invalid {key} {raw!r}") from None


def _decode_note(paragraph: str) -> Note:
    fields = parse_fields(paragraph)
    guid = _parse_guid(_required(fields, F_GUID, "note"), F_GUID, "note")
    try:
        return Note(
            guid=guid,
            creation_utc=_parse_ticks(_required(fields, F_CREATION, "note"), F_CREATION, "note"),
            content=unescape(fields.get(F_CONTENT)),
        )
    except StorageFormatError as e:
        e.with_context(guid=guid)
        raise


def decode_task(
    text: str,
    *,
    file_stem: str | None = None,
    overrides: OverrideLookup | None = None,
) -> Task:
    """
    Decode one task file.

    Raises:
    - TaskFormatError / InvalidEscapeError for structural problems,
    - TaskIdentityError when file_stem is given and does not match the embedded Guid.
    """
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        raise TaskFormatError("empty task record")

    header = parse_fields(paragraphs[0])

    fmt = header.get(F_FORMAT)
    if fmt != TASK_FORMAT:
        raise TaskFormatError(f"unsupported format {fmt!r} (expected {TASK_FORMAT!r})")

    raw_guid = _required(header, F_GUID, "task")
    guid = _parse_guid(raw_guid, F_GUID, "task")

    if file_stem is not None and raw_guid.strip().casefold() != file_stem.casefold():
        raise TaskIdentityError(f"file name {file_stem!r} does not match Guid", guid=guid)

    lookup = overrides or NO_OVERRIDES

    try:
        handling_raw = header.get(F_HANDLING)
        repeated_raw = header.get(F_REPEATED)
        task = Task(
            guid=guid,
            creation_utc=_parse_ticks(_required(header, F_CREATION, "task"), F_CREATION, "task"),
            content=unescape(header.get(F_CONTENT)),
            state=resolve_state(lookup.read_state(guid), header.get(F_STATE)),
            handling_utc=_parse_ticks(handling_raw, F_HANDLING, "task") if handling_raw else None,
            repeated_guid=_parse_guid(repeated_raw, F_REPEATED, "task") if repeated_raw else None,
            ordering_utc=resolve_ordering(lookup.read_ordering(guid), header.get(F_ORDERING)),
            notes=[_decode_note(p) for p in paragraphs[1:]],
        )
    except StorageFormatError as e:
        e.with_context(guid=guid)
        raise

    task.sort_notes()
    return task


# ---- encode ----

def _header_lines(task: Task) -> list[str]:
    lines = [
        f"{F_FORMAT}:{TASK_FORMAT}",
        f"{F_GUID}:{task.guid}",
        f"{F_CREATION}:{task.creation_utc}",
        f"{F_CONTENT}:{escape(task.content)}",
        f"{F_STATE}:{storage_state(task.state)}",
    ]
    if task.handling_utc is not None:
        lines.append(f"{F_HANDLING}:{task.handling_utc}")
    if task.repeated_guid is not None:
        lines.append(f"{F_REPEATED}:{task.repeated_guid}")
    return lines


def _note_lines(note: Note) -> list[str]:
    return [
        f"{F_GUID}:{note.guid}",
        f"{F_CREATION}:{note.creation_utc}",
        f"{F_CONTENT}:{escape(note.content)}",
    ]


def encode_task(task: Task) -> str:
    """Current-generation text for one task file. OrderingUtc is never written here."""
    paragraphs = [_header_lines(task)]
    paragraphs.extend(_note_lines(n) for n in task.notes)

    lines: list[str] = []
    for i, para in enumerate(paragraphs):
        if i:
            lines.append("")
        lines.extend(para)
    return "".join(line + NEWLINE for line in lines)
