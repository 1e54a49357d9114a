# src/tasklist_store/tasks/ordering.py

from __future__ import annotations

"""
Ordering reconciliation.

Imported/legacy tasks may carry a negative ("unassigned") ordering.
On every full load they get fresh positions in front of all resolved tasks,
keeping their relative import order. Nothing is written here: the assigned
value reaches disk only when the caller later updates that task, so the
"special" highlight survives repeated loads until the user acts on it.
"""

from collections.abc import Iterable

from .task_models import Task


def sort_key(task: Task) -> tuple[int, int]:
    return task.ordering_utc, task.creation_utc


def reconcile_ordering(tasks: Iterable[Task], *, now_ticks: int) -> list[Task]:
    """
    Assign positions to tasks with ordering < 0 and return all tasks sorted.

    - floor = min(resolved orderings), or now_ticks when nothing is resolved
    - pending tasks are ordered by their current (negative) value, then creation time
    - values floor-1, floor-2, ... are handed out from the back of that order,
      so the first pending task gets the lowest value and sorts first
    - reconciled tasks are flagged is_special (in memory only)
    """
    items = list(tasks)
    resolved = [t for t in items if t.ordering_utc >= 0]
    pending = sorted((t for t in items if t.ordering_utc < 0), key=sort_key)

    if pending:
        floor = min((t.ordering_utc for t in resolved), default=now_ticks)
        for offset, task in enumerate(reversed(pending), start=1):
            task.ordering_utc = floor - offset
            task.is_special = True

    items.sort(key=sort_key)
    return items
