"""Line formats of the task file."""

import logging
import re
from typing import Generic, Optional, TypeVar

from pydantic import ValidationError

from .errors import ParseError
from .task_node import FIELD_SEPARATOR, FlatTask, Task

logger = logging.getLogger(__name__)

# "No parent" is written as the largest 64-bit unsigned integer.
NO_PARENT = 2**64 - 1

_INDEX_RE = re.compile(r"\+?[0-9]+")

T = TypeVar("T")


def _parse_bool(line: str, raw: str) -> bool:
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ParseError(line, f"expected 'true' or 'false', got {raw!r}")


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _parse_parent(line: str, raw: str) -> Optional[int]:
    if not _INDEX_RE.fullmatch(raw):
        raise ParseError(line, f"expected a non-negative integer, got {raw!r}")
    value = int(raw)
    if value > NO_PARENT:
        raise ParseError(line, f"parent index {raw} is out of range")
    return None if value == NO_PARENT else value


def _split(line: str, expected: int) -> list:
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) != expected:
        raise ParseError(line, f"expected {expected} fields, got {len(parts)}")
    return parts


class LineCodec(Generic[T]):
    """Converts one task to and from one line of text."""

    field_count: int = 0

    def encode(self, task: T) -> str:
        raise NotImplementedError

    def decode(self, line: str) -> T:
        raise NotImplementedError


class HierarchicalCodec(LineCodec[Task]):
    """``name,is_sub,completed,parent_index``"""

    field_count = 4

    def encode(self, task: Task) -> str:
        parent = NO_PARENT if task.parent is None else task.parent
        return FIELD_SEPARATOR.join(
            [task.name, _format_bool(task.is_sub), _format_bool(task.is_completed), str(parent)]
        )

    def decode(self, line: str) -> Task:
        name, is_sub, completed, parent = _split(line, self.field_count)
        is_sub_value = _parse_bool(line, is_sub)
        completed_value = _parse_bool(line, completed)
        parent_value = _parse_parent(line, parent)
        if not is_sub_value and parent_value is not None:
            logger.warning(f"Main task with parent index {parent_value}, ignoring the parent: {line}")
            parent_value = None
        try:
            return Task(
                name=name,
                is_sub=is_sub_value,
                is_completed=completed_value,
                parent=parent_value,
            )
        except ValidationError as e:
            raise ParseError(line, e.errors()[0]["msg"]) from e


class FlatCodec(LineCodec[FlatTask]):
    """``name,description,completed``"""

    field_count = 3

    def encode(self, task: FlatTask) -> str:
        return FIELD_SEPARATOR.join([task.name, task.description, _format_bool(task.completed)])

    def decode(self, line: str) -> FlatTask:
        name, description, completed = _split(line, self.field_count)
        completed_value = _parse_bool(line, completed)
        try:
            return FlatTask(name=name, description=description, completed=completed_value)
        except ValidationError as e:
            raise ParseError(line, e.errors()[0]["msg"]) from e
