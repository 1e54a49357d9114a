# tests/test_task_codec.py

from __future__ import annotations

import uuid

import pytest

from tasklist_store.core.errors import InvalidEscapeError, TaskFormatError, TaskIdentityError
from tasklist_store.tasks.task_codec import (
    StaticOverrides,
    decode_task,
    encode_task,
    resolve_ordering,
    resolve_state,
)
from tasklist_store.tasks.task_models import Note, Task, TaskState

TASK_ID = uuid.UUID("6f1c2d4e-8a9b-4c3d-9e0f-112233445566")
NOTE_A = uuid.UUID("00000000-0000-0000-0000-0000000000aa")
NOTE_B = uuid.UUID("00000000-0000-0000-0000-0000000000bb")


def _header(state: str = "Active", extra: str = "") -> str:
    return (
        "Format:1\r\n"
        f"Guid:{TASK_ID}\r\n"
        "CreationUtc:638500000000000000\r\n"
        "Content:Buy milk\\nand bread\r\n"
        f"State:{state}\r\n"
        f"{extra}"
    )


def test_encode_writes_current_generation_layout() -> None:
    task = Task(
        guid=TASK_ID,
        creation_utc=638500000000000000,
        content="Buy milk\nand bread",
        state=TaskState.NOW,
        ordering_utc=12345,
        notes=[Note(guid=NOTE_A, creation_utc=100, content="tab\there")],
    )
    assert encode_task(task) == (
        "Format:1\r\n"
        "Guid:6f1c2d4e-8a9b-4c3d-9e0f-112233445566\r\n"
        "CreationUtc:638500000000000000\r\n"
        "Content:Buy milk\\nand bread\r\n"
        "State:Active\r\n"
        "\r\n"
        "Guid:00000000-0000-0000-0000-0000000000aa\r\n"
        "CreationUtc:100\r\n"
        "Content:tab\\there\r\n"
    )


def test_encode_terminal_state_and_optional_fields() -> None:
    repeated = uuid.UUID("11111111-2222-3333-4444-555555555555")
    task = Task(
        guid=TASK_ID,
        creation_utc=1,
        content="",
        state=TaskState.CANCELLED,
        handling_utc=99,
        repeated_guid=repeated,
    )
    text = encode_task(task)
    assert "State:Cancelled\r\n" in text
    assert "HandlingUtc:99\r\n" in text
    assert f"RepeatedGuid:{repeated}\r\n" in text
    assert "OrderingUtc" not in text


def test_encode_uses_lowercase_guid() -> None:
    task = Task(guid=uuid.UUID(str(TASK_ID).upper()), creation_utc=1)
    assert f"Guid:{str(TASK_ID).lower()}\r\n" in encode_task(task)


def test_decode_rejects_wrong_format_tag() -> None:
    with pytest.raises(TaskFormatError):
        decode_task(_header().replace("Format:1", "Format:2"))
    with pytest.raises(TaskFormatError):
        decode_task(_header().replace("Format:1\r\n", ""))


def test_decode_rejects_empty_record() -> None:
    with pytest.raises(TaskFormatError):
        decode_task("\r\n\r\n")


def test_decode_checks_file_name_case_insensitively() -> None:
    task = decode_task(_header(), file_stem=str(TASK_ID).upper())
    assert task.guid == TASK_ID

    with pytest.raises(TaskIdentityError):
        decode_task(_header(), file_stem="00000000-0000-0000-0000-000000000001")


def test_state_override_wins_over_active_marker() -> None:
    task = decode_task(_header(), overrides=StaticOverrides(state_text="Now"))
    assert task.state == TaskState.NOW


def test_active_marker_without_override_defaults_to_later() -> None:
    task = decode_task(_header(extra="HandlingUtc:5\r\n"))
    assert task.state == TaskState.LATER


def test_legacy_embedded_state_is_read() -> None:
    assert decode_task(_header(state="Soon")).state == TaskState.SOON
    assert decode_task(_header(state="Done")).state == TaskState.DONE


def test_override_beats_legacy_embedded_state() -> None:
    task = decode_task(_header(state="Soon"), overrides=StaticOverrides(state_text="Later\r\n"))
    assert task.state == TaskState.LATER


def test_unparseable_or_terminal_override_falls_through() -> None:
    assert decode_task(_header(state="Soon"), overrides=StaticOverrides(state_text="garbage")).state == TaskState.SOON
    assert decode_task(_header(), overrides=StaticOverrides(state_text="Done")).state == TaskState.LATER


def test_resolve_state_chain() -> None:
    assert resolve_state(TaskState.SOON, "Done") == TaskState.SOON
    assert resolve_state(None, "Cancelled") == TaskState.CANCELLED
    assert resolve_state(None, "Active") == TaskState.LATER
    assert resolve_state(None, "Queued") == TaskState.LATER
    assert resolve_state(None, None) == TaskState.LATER


def test_resolve_ordering_chain() -> None:
    assert resolve_ordering(7, "42") == 7
    assert resolve_ordering(None, "42") == 42
    assert resolve_ordering(None, "-3") == -3
    assert resolve_ordering(None, "x") == -1
    assert resolve_ordering(None, None) == -1


def test_decode_ordering_precedence() -> None:
    legacy = _header(extra="OrderingUtc:42\r\n")
    assert decode_task(legacy).ordering_utc == 42
    assert decode_task(legacy, overrides=StaticOverrides(ordering_text="-9")).ordering_utc == -9
    assert decode_task(legacy, overrides=StaticOverrides(ordering_text="nope")).ordering_utc == 42
    assert decode_task(_header()).ordering_utc == -1


def test_decode_sorts_notes_by_creation() -> None:
    text = (
        _header()
        + "\r\n"
        + f"Guid:{NOTE_B}\r\nCreationUtc:200\r\nContent:second\r\n"
        + "\r\n"
        + f"Guid:{NOTE_A}\r\nCreationUtc:100\r\nContent:first\\\\path\r\n"
    )
    task = decode_task(text)
    assert [n.creation_utc for n in task.notes] == [100, 200]
    assert task.notes[0].content == "first\\path"
    assert task.content == "Buy milk\nand bread"


def test_invalid_escape_in_note_is_a_decode_error() -> None:
    text = _header() + "\r\n" + f"Guid:{NOTE_A}\r\nCreationUtc:1\r\nContent:bad \\q\r\n"
    with pytest.raises(InvalidEscapeError) as exc:
        decode_task(text)
    assert exc.value.guid == NOTE_A


def test_decode_reads_lf_only_files() -> None:
    text = _header().replace("\r\n", "\n")
    assert decode_task(text).content == "Buy milk\nand bread"


def test_round_trip_with_overrides() -> None:
    original = Task(
        guid=TASK_ID,
        creation_utc=638500000000000000,
        content="multi\nline\twith \\ backslash",
        state=TaskState.SOON,
        repeated_guid=NOTE_B,
        ordering_utc=555,
        notes=[
            Note(guid=NOTE_A, creation_utc=1, content="a"),
            Note(guid=NOTE_B, creation_utc=2, content="b\r\nc"),
        ],
    )
    overrides = StaticOverrides(state_text=original.state.value, ordering_text=str(original.ordering_utc))
    assert decode_task(encode_task(original), overrides=overrides) == original
