"""File-based task-list storage: tasks, notes and attachments as plain text."""

from .files.file_models import FileAttachment
from .files.file_store import FileStore
from .storage.layout import TaskListLayout, find_task_lists, is_task_list_root
from .tasks.task_models import Note, Task, TaskState
from .tasks.task_store import TaskListStore

__all__ = [
    "FileAttachment",
    "FileStore",
    "Note",
    "Task",
    "TaskListLayout",
    "TaskListStore",
    "TaskState",
    "find_task_lists",
    "is_task_list_root",
]
