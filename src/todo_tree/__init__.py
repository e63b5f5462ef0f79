"""Todo Tree - task list manager with one level of sub-tasks."""

__version__ = "0.1.0"

from .task_node import Task, FlatTask
from .task_store import TaskStore, FlatTaskStore
from .storage import FileTaskRepository, MemoryTaskRepository, TaskRepository
from .errors import IndexOutOfRange, NoMainTaskError, ParseError, TodoTreeError

__all__ = [
    "Task",
    "FlatTask",
    "TaskStore",
    "FlatTaskStore",
    "TaskRepository",
    "FileTaskRepository",
    "MemoryTaskRepository",
    "TodoTreeError",
    "ParseError",
    "IndexOutOfRange",
    "NoMainTaskError",
]
