# src/tasklist_store/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

UNASSIGNED_ORDERING = -1


class TaskState(StrEnum):
    """
    Task lifecycle state.

    Notes:
    - Later/Soon/Now are "active"; their live value is kept in States/<Guid>.txt.
    - Done/Cancelled are terminal and stored in the task file itself.
    """

    LATER = "Later"
    SOON = "Soon"
    NOW = "Now"
    DONE = "Done"
    CANCELLED = "Cancelled"

    @property
    def is_active(self) -> bool:
        return self in _ACTIVE_STATES

    @classmethod
    def parse(cls, raw: str | None) -> TaskState | None:
        if raw is None:
            return None
        try:
            return cls(raw.strip())
        except ValueError:
            return None


_ACTIVE_STATES = frozenset({TaskState.LATER, TaskState.SOON, TaskState.NOW})


@dataclass(slots=True)
class Note:
    guid: UUID
    creation_utc: int
    content: str = ""


@dataclass(slots=True)
class Task:
    guid: UUID
    creation_utc: int
    content: str = ""
    state: TaskState = TaskState.LATER
    handling_utc: int | None = None
    repeated_guid: UUID | None = None

    # Lower sorts first; negative means "not assigned yet".
    ordering_utc: int = UNASSIGNED_ORDERING
    # In-memory only: ordering was reconciled during the current load.
    is_special: bool = field(default=False, compare=False)

    notes: list[Note] = field(default_factory=list)

    @property
    def has_unassigned_ordering(self) -> bool:
        return self.ordering_utc < 0

    def sort_notes(self) -> None:
        self.notes.sort(key=lambda n: n.creation_utc)
