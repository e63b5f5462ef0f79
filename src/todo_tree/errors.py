"""Exception types raised by the task list."""


class TodoTreeError(Exception):
    """Base class for all todo-tree errors."""


class ParseError(TodoTreeError, ValueError):
    """A persisted line could not be turned into a task."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"Failed to parse task: {line!r} ({reason})")


class IndexOutOfRange(TodoTreeError, IndexError):
    """A command referenced a task index outside the list."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"No task at index {index} (list has {length} tasks)")


class NoMainTaskError(TodoTreeError, ValueError):
    """A sub-task was requested but there is no main task to anchor it to."""

    def __init__(self):
        super().__init__("Cannot add a sub-task: there is no main task to attach it to")


class InvalidTaskNameError(TodoTreeError, ValueError):
    """A task name contains characters the task file cannot store."""


class StorageError(TodoTreeError):
    """The task file exists but could not be read."""
