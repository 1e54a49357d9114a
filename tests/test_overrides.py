# tests/test_overrides.py

from __future__ import annotations

import uuid

from tasklist_store.storage.layout import TaskListLayout
from tasklist_store.tasks.overrides import OverrideStore
from tasklist_store.tasks.task_models import TaskState

from .fakes import write_raw

GUID = uuid.UUID(int=42)


def test_state_override_write_read_and_delete(layout: TaskListLayout) -> None:
    ov = OverrideStore(layout)
    assert ov.read_state(GUID) is None

    ov.write_state(GUID, TaskState.SOON)
    assert layout.state_path(GUID).read_text("utf-8") == "Soon"
    assert ov.read_state(GUID) == TaskState.SOON

    ov.write_state(GUID, TaskState.DONE)
    assert not layout.state_path(GUID).exists()
    assert ov.read_state(GUID) is None

    # terminal state with no file present is a no-op
    ov.write_state(GUID, TaskState.CANCELLED)
    assert not layout.state_path(GUID).exists()


def test_ordering_override_always_overwrites(layout: TaskListLayout) -> None:
    ov = OverrideStore(layout)
    assert ov.read_ordering(GUID) is None

    ov.write_ordering(GUID, 10)
    ov.write_ordering(GUID, -7)
    assert layout.ordering_path(GUID).read_text("utf-8") == "-7"
    assert ov.read_ordering(GUID) == -7


def test_unparseable_overrides_read_as_absent(layout: TaskListLayout) -> None:
    ov = OverrideStore(layout)
    write_raw(layout.state_path(GUID), "Tomorrow")
    write_raw(layout.ordering_path(GUID), "12abc")
    assert ov.read_state(GUID) is None
    assert ov.read_ordering(GUID) is None


def test_undecodable_overrides_read_as_absent(layout: TaskListLayout) -> None:
    ov = OverrideStore(layout)
    layout.state_path(GUID).write_bytes(b"\xffSoon")
    layout.ordering_path(GUID).write_bytes(b"12\xe9")
    assert ov.read_state(GUID) is None
    assert ov.read_ordering(GUID) is None


def test_overrides_tolerate_bom_and_newline(layout: TaskListLayout) -> None:
    ov = OverrideStore(layout)
    write_raw(layout.state_path(GUID), "\ufeffNow\r\n")
    write_raw(layout.ordering_path(GUID), " 638500000000000000\n")
    assert ov.read_state(GUID) == TaskState.NOW
    assert ov.read_ordering(GUID) == 638500000000000000


def test_delete_removes_both_files(layout: TaskListLayout) -> None:
    ov = OverrideStore(layout)
    ov.write_state(GUID, TaskState.NOW)
    ov.write_ordering(GUID, 1)
    ov.delete(GUID)
    assert not layout.state_path(GUID).exists()
    assert not layout.ordering_path(GUID).exists()
