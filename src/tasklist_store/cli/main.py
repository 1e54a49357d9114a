# src/tasklist_store/cli/main.py

"""
CLI entrypoint for inspecting a task-list directory.

Initializes logging from settings, opens the stores and runs one command:
- tasks: list tasks in display order (special ones marked with "*")
- show: one task with its notes
- files: attachment ledger entries
- attach: copy a file into the list
- compact-ledger: drop detached entries from Files/Info.txt
"""

from __future__ import annotations

import argparse
import logging
import uuid
from collections.abc import Sequence
from pathlib import Path

from ..config import Settings, get_settings
from ..core.clock import from_ticks
from ..core.errors import StorageFormatError
from ..files.file_store import FileStore
from ..logging_setup import setup_logging
from ..storage.layout import is_task_list_root
from ..tasks.task_models import Task
from ..tasks.task_store import TaskListStore

logger = logging.getLogger(__name__)


def _first_line(text: str) -> str:
    return text.splitlines()[0] if text else ""


def _format_task(task: Task) -> str:
    mark = "*" if task.is_special else " "
    return f"{mark} {task.guid}  {task.state.value:<9}  {_first_line(task.content)}"


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=settings.app_name)
    parser.add_argument("--root", type=Path, default=settings.root, help="task list directory")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict_load,
        help="fail on the first unreadable task file or ledger section",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_tasks = sub.add_parser("tasks", help="list tasks")
    p_tasks.add_argument("--all", action="store_true", help="include done/cancelled tasks")

    p_show = sub.add_parser("show", help="show one task")
    p_show.add_argument("guid", type=uuid.UUID)

    p_files = sub.add_parser("files", help="list attachments")
    p_files.add_argument("--parent", type=uuid.UUID, default=None)

    p_attach = sub.add_parser("attach", help="attach a file")
    p_attach.add_argument("source", type=Path)
    p_attach.add_argument("--parent", type=uuid.UUID, default=None)

    sub.add_parser("compact-ledger", help="rewrite the ledger without detached entries")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> int:
    root: Path = args.root
    if not is_task_list_root(root):
        print(f"Not a task list: {root}")
        return 2

    tasks = TaskListStore(root, strict=args.strict)
    files = FileStore(
        root, max_attachment_slots=settings.max_attachment_slots, strict=args.strict
    )

    if args.command == "tasks":
        for task in tasks.load_tasks(include_done=args.all):
            print(_format_task(task))
        return 0

    if args.command == "show":
        task = tasks.load_task(args.guid)
        if task is None:
            print(f"Task not found: {args.guid}")
            return 1
        print(_format_task(task))
        print(f"  created: {from_ticks(task.creation_utc):%Y-%m-%d %H:%M:%S}")
        if task.handling_utc is not None:
            print(f"  handled: {from_ticks(task.handling_utc):%Y-%m-%d %H:%M:%S}")
        print(task.content)
        for note in task.notes:
            print(f"  -- note {note.guid} ({from_ticks(note.creation_utc):%Y-%m-%d %H:%M:%S})")
            print(f"  {note.content}")
        return 0

    if args.command == "files":
        if args.parent is None:
            items = files.list_attachments()
        else:
            items = files.list_attachments(args.parent)
        for att in items:
            print(f"{att.guid}  {att.relative_path}  parent={att.parent_guid or '-'}")
        return 0

    if args.command == "attach":
        att = files.attach(args.source, parent_guid=args.parent)
        print(f"{att.guid}  {att.relative_path}")
        return 0

    if args.command == "compact-ledger":
        dropped = files.compact_ledger()
        print(f"Dropped {dropped} ledger section(s).")
        return 0

    return 2


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    args = _build_parser(settings).parse_args(argv)

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    try:
        return run(args, settings)
    except StorageFormatError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
