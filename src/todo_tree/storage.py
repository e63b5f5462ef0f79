"""Loading and saving task lists."""

import logging
from pathlib import Path
from typing import Generic, List, Optional, Sequence, TypeVar

from .codec import FlatCodec, HierarchicalCodec, LineCodec
from .errors import ParseError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TASK_FILE = Path("tasks.txt")


def split_lines(contents: str) -> List[str]:
    """Split file contents on "\n" only; other line-break characters belong to names."""
    lines = contents.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class TaskRepository(Generic[T]):
    """Somewhere a task list can be loaded from and saved to."""

    def load(self) -> List[T]:
        raise NotImplementedError

    def save(self, tasks: Sequence[T]) -> bool:
        raise NotImplementedError


class FileTaskRepository(TaskRepository[T]):
    """
    Task list stored as one line per task in a text file.

    Lines that fail to parse are logged and skipped. A missing file is an
    empty list. Save failures are logged and reported as ``False`` so the
    caller can carry on with its in-memory state.
    """

    def __init__(self, codec: LineCodec[T], path: Optional[Path] = None):
        """Initialize repository with a line codec and optional file path."""
        self.codec = codec
        self.path = Path(path) if path is not None else DEFAULT_TASK_FILE

    def load(self) -> List[T]:
        """Read every parseable task from the file."""
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"No task file at {self.path}, starting with an empty list")
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e

        tasks = []
        for line in split_lines(contents):
            if not line.strip():
                continue
            try:
                tasks.append(self.codec.decode(line))
            except ParseError as e:
                logger.warning(f"Failed to parse task: {line} ({e.reason})")

        logger.debug(f"Loaded {len(tasks)} tasks from {self.path}")
        return tasks

    def save(self, tasks: Sequence[T]) -> bool:
        """Overwrite the file with ``tasks``."""
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                for task in tasks:
                    f.write(self.codec.encode(task) + "\n")
        except OSError as e:
            logger.error(f"Couldn't write to file {self.path}: {e}")
            return False

        logger.debug(f"Saved {len(tasks)} tasks to {self.path}")
        return True


class MemoryTaskRepository(TaskRepository[T]):
    """Keeps the encoded lines in memory; used when no file should be touched."""

    def __init__(self, codec: LineCodec[T], lines: Optional[Sequence[str]] = None):
        self.codec = codec
        self.lines: List[str] = list(lines or [])
        self.save_count = 0

    def load(self) -> List[T]:
        tasks = []
        for line in self.lines:
            try:
                tasks.append(self.codec.decode(line))
            except ParseError as e:
                logger.warning(f"Failed to parse task: {line} ({e.reason})")
        return tasks

    def save(self, tasks: Sequence[T]) -> bool:
        self.lines = [self.codec.encode(task) for task in tasks]
        self.save_count += 1
        return True


def open_repository(path: Optional[Path] = None, flat: bool = False) -> FileTaskRepository:
    """Get a file repository for the chosen task list variant."""
    codec = FlatCodec() if flat else HierarchicalCodec()
    return FileTaskRepository(codec, path)
