# tests/conftest.py

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from todo_tree.codec import FlatCodec, HierarchicalCodec
from todo_tree.storage import MemoryTaskRepository
from todo_tree.task_store import TaskStore


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TODO_TREE_* variables from the developer's shell out of tests."""
    for name in ("FILE", "VARIANT", "SHOW_INDEX", "LOG_LEVEL"):
        monkeypatch.delenv(f"TODO_TREE_{name}", raising=False)


@pytest.fixture()
def store() -> TaskStore:
    """[A, B (sub of 0), C, D (sub of 2)]"""
    s = TaskStore()
    s.add_main("A")
    s.add_sub("B")
    s.add_main("C")
    s.add_sub("D")
    return s


@pytest.fixture()
def repo() -> MemoryTaskRepository:
    return MemoryTaskRepository(HierarchicalCodec())


@pytest.fixture()
def flat_repo() -> MemoryTaskRepository:
    return MemoryTaskRepository(FlatCodec())


@pytest.fixture()
def console() -> Console:
    """Console writing plain text into a buffer (read it back with ``output``)."""
    return Console(file=io.StringIO(), width=200, color_system=None)


def output(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture()
def task_file(tmp_path: Path) -> Path:
    return tmp_path / "tasks.txt"
