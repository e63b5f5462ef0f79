"""Settings read from ``TODO_TREE_*`` environment variables."""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError

ENV_PREFIX = "TODO_TREE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw.strip()


_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    value = raw.lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {name} setting: expected a boolean, got {raw!r}")


class Settings(BaseModel):
    """Runtime settings for the task list."""

    task_file: Path = Field(default=Path("tasks.txt"), description="Task file path")
    variant: Literal["hierarchical", "flat"] = Field(
        default="hierarchical", description="Task list variant"
    )
    show_index: bool = Field(default=True, description="Show indices in the task list")
    log_level: str = Field(default="WARNING", description="Logging level name")

    @property
    def flat(self) -> bool:
        return self.variant == "flat"


def get_settings() -> Settings:
    """
    Build settings from the environment.

    Raises:
        ValueError: if a variable holds a value the settings cannot accept.
    """
    values = {}

    task_file = _env(_k("FILE"))
    if task_file is not None:
        values["task_file"] = Path(task_file).expanduser()

    variant = _env(_k("VARIANT"))
    if variant is not None:
        values["variant"] = variant.lower()

    log_level = _env(_k("LOG_LEVEL"))
    if log_level is not None:
        values["log_level"] = log_level.upper()

    values["show_index"] = _env_bool(_k("SHOW_INDEX"), True)

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ValueError(f"Invalid {ENV_PREFIX}_* setting: {e.errors()[0]['msg']}") from e
