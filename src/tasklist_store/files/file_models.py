# src/tasklist_store/files/file_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class FileAttachment:
    """
    One attachment recorded in Files/Info.txt.

    Fields:
        relative_path: path below Files/, forward-slash separated.
        parent_guid: owning task or note; None means the task list as a whole.
        attached_at: when the ledger entry was written (UTC).
        modified_at: source file mtime captured at copy time (UTC).
    """

    guid: UUID
    relative_path: str
    parent_guid: UUID | None
    attached_at: datetime
    modified_at: datetime

    @property
    def file_name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]
