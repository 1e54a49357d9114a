# src/tasklist_store/storage/fs.py

"""
Local filesystem primitives.

Text is UTF-8: a BOM is tolerated on read and never written.
Newlines are written exactly as given (callers emit CRLF).
Errors are OSError and propagate unchanged; nothing here retries.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalFileSystem:
    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        # newline="" keeps CR characters so the paragraph splitter sees the real line endings.
        with open(path, encoding="utf-8-sig", newline="") as f:
            return f.read()

    def write_text(self, path: Path, text: str) -> None:
        """Replace the file content via a temp file + os.replace."""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        tmp.write_bytes(text.encode("utf-8"))
        os.replace(tmp, path)

    def append_text(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "ab") as f:
            f.write(text.encode("utf-8"))

    def delete(self, path: Path) -> bool:
        """Delete a file if present. Returns True when something was removed."""
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def copy_exclusive(self, source: Path, target: Path) -> None:
        """
        Copy source bytes to target without ever overwriting.

        Raises FileExistsError if target already exists (the caller picks another name).
        """
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(source, "rb") as src, open(target, "xb") as dst:
            shutil.copyfileobj(src, dst)
        try:
            shutil.copystat(source, target)
        except OSError:
            logger.debug("copystat failed src=%s dst=%s", source, target, exc_info=True)

    def modified_at(self, path: Path) -> datetime:
        return datetime.fromtimestamp(path.stat().st_mtime, UTC)

    def list_files(self, directory: Path, pattern: str = "*") -> Iterator[Path]:
        if not directory.is_dir():
            return iter(())
        return iter(sorted(p for p in directory.glob(pattern) if p.is_file()))
