# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist_store.files.file_store import FileStore
from tasklist_store.storage.layout import TaskListLayout
from tasklist_store.tasks.task_store import TaskListStore

from .fakes import FakeClock, SequentialIds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture()
def layout(tmp_path: Path) -> TaskListLayout:
    """An initialized, empty task list under tmp_path/list."""
    lay = TaskListLayout(tmp_path / "list")
    lay.initialize("Test list")
    return lay


@pytest.fixture()
def store(layout: TaskListLayout, clock: FakeClock, ids: SequentialIds) -> TaskListStore:
    return TaskListStore(layout.root, clock=clock, ids=ids)


@pytest.fixture()
def file_store(layout: TaskListLayout, clock: FakeClock, ids: SequentialIds) -> FileStore:
    return FileStore(layout.root, clock=clock, ids=ids)
