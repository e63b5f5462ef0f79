"""Task data models and their display text."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

FIELD_SEPARATOR = ","


def check_text_field(value: str) -> str:
    """Reject text the line-based task file cannot represent."""
    if FIELD_SEPARATOR in value or "\n" in value or "\r" in value:
        raise ValueError(
            f"must not contain {FIELD_SEPARATOR!r} or line breaks: {value!r}"
        )
    return value


class Task(BaseModel):
    """
    One row of the hierarchical task list.

    A main task has no parent. A sub-task points at its main task through
    ``parent``, which is a position in the owning list rather than an id.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(..., description="Task label")
    is_sub: bool = Field(default=False, description="True for a sub-task")
    is_completed: bool = Field(default=False, description="Completion flag")
    parent: Optional[int] = Field(None, ge=0, description="Index of the owning main task")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return check_text_field(value)

    @model_validator(mode="after")
    def _check_parent(self) -> "Task":
        # Orphaned sub-tasks (no parent) are tolerated; they never cascade.
        if not self.is_sub and self.parent is not None:
            raise ValueError("a main task cannot have a parent")
        return self

    @classmethod
    def main(cls, name: str) -> "Task":
        """Create a new, incomplete main task."""
        return cls(name=name)

    @classmethod
    def sub(cls, name: str, parent: int) -> "Task":
        """Create a new, incomplete sub-task anchored at ``parent``."""
        return cls(name=name, is_sub=True, parent=parent)

    def complete(self) -> None:
        """Mark task as completed."""
        self.is_completed = True

    def uncomplete(self) -> None:
        """Mark task as not completed."""
        self.is_completed = False

    def is_child_of(self, index: int) -> bool:
        """Check if this is a sub-task anchored at ``index``."""
        return self.is_sub and self.parent == index

    def label(self) -> str:
        """Checkbox and name, without the sub-task arrow."""
        mark = "x" if self.is_completed else " "
        return f"[{mark}] {self.name}"

    def __str__(self) -> str:
        prefix = " -> " if self.is_sub else ""
        return f"{prefix}{self.label()}"


class FlatTask(BaseModel):
    """One row of the flat task list."""

    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(..., description="Task label")
    description: str = Field(default="", description="Free-form details")
    completed: bool = Field(default=False, description="Completion flag")

    @field_validator("name", "description")
    @classmethod
    def _check_text(cls, value: str) -> str:
        return check_text_field(value)

    def complete(self) -> None:
        """Mark task as completed."""
        self.completed = True

    def uncomplete(self) -> None:
        """Mark task as not completed."""
        self.completed = False

    @property
    def is_completed(self) -> bool:
        return self.completed

    def __str__(self) -> str:
        mark = "x" if self.completed else " "
        if self.description:
            return f"[{mark}] {self.name}: {self.description}"
        return f"[{mark}] {self.name}"
