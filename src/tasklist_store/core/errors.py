# src/tasklist_store/core/errors.py

"""
Exception taxonomy for the storage engine.

- StorageFormatError and subclasses: a single record is structurally broken.
- TaskIdentityError: file name and embedded Guid disagree (record is skipped by bulk loads).
- I/O problems are plain OSError and are never wrapped.
"""

from __future__ import annotations

from pathlib import Path
from uuid import UUID


class StorageFormatError(ValueError):
    """A stored record cannot be decoded. Carries optional file/Guid context."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        guid: UUID | str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None
        self.guid = guid

    def with_context(
        self,
        *,
        path: str | Path | None = None,
        guid: UUID | str | None = None,
    ) -> StorageFormatError:
        if path is not None and self.path is None:
            self.path = Path(path)
        if guid is not None and self.guid is None:
            self.guid = guid
        return self

    def __str__(self) -> str:
        parts = [self.message]
        if self.path is not None:
            parts.append(f"path={self.path}")
        if self.guid is not None:
            parts.append(f"guid={self.guid}")
        return " ".join(parts)


class InvalidEscapeError(StorageFormatError):
    pass


class TaskFormatError(StorageFormatError):
    pass


class TaskIdentityError(StorageFormatError):
    pass


class LedgerFormatError(StorageFormatError):
    pass


class OperationCancelledError(Exception):
    """Raised between per-file iterations when the caller's cancel event is set."""


class AttachmentSlotsExhaustedError(RuntimeError):
    pass


class TaskNotFoundError(LookupError):
    pass
