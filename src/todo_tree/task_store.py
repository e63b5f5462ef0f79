"""In-memory task lists and their hierarchy maintenance."""

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set

import networkx as nx
from pydantic import ValidationError

from .errors import IndexOutOfRange, InvalidTaskNameError, NoMainTaskError
from .task_node import FlatTask, Task

logger = logging.getLogger(__name__)


class _IndexedStore:
    """Shared index handling for both task list variants."""

    def __init__(self, tasks: Optional[Sequence] = None):
        self.tasks: List = list(tasks or [])

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator:
        return iter(self.tasks)

    def __getitem__(self, index: int):
        return self.tasks[self._check_index(index)]

    def _check_index(self, index: int) -> int:
        """Return ``index`` if it addresses a task, else raise IndexOutOfRange."""
        if index < 0 or index >= len(self.tasks):
            raise IndexOutOfRange(index, len(self.tasks))
        return index

    def toggle_undone(self, index: int) -> None:
        """Mark the task at ``index`` as not completed."""
        self.tasks[self._check_index(index)].uncomplete()

    def complete_all(self) -> None:
        """Mark every task as completed."""
        for task in self.tasks:
            task.complete()

    def clear_all(self) -> None:
        """Remove every task."""
        self.tasks.clear()

    def stats(self) -> Dict[str, int]:
        """Get counts of tasks by completion."""
        completed = sum(1 for task in self.tasks if task.is_completed)
        return {
            "total": len(self.tasks),
            "completed": completed,
            "pending": len(self.tasks) - completed,
        }


class TaskStore(_IndexedStore):
    """
    Ordered list of main tasks and their sub-tasks.

    Tasks are addressed by position. A sub-task records the position of its
    main task when it is added; removals keep those positions coherent by
    deleting bottom-up and shifting the parent of every later task.
    """

    tasks: List[Task]

    def add_main(self, name: str) -> Task:
        """Append a new main task."""
        task = self._build(Task.main, name)
        self.tasks.append(task)
        logger.debug(f"Added main task {len(self.tasks) - 1}: {name!r}")
        return task

    def add_sub(self, name: str) -> Task:
        """Append a sub-task anchored to the most recent main task."""
        parent_index = self.find_nearest_preceding_main()
        task = self._build(Task.sub, name, parent_index)
        self.tasks.append(task)
        logger.debug(f"Added sub-task {len(self.tasks) - 1} under {parent_index}: {name!r}")
        return task

    def find_nearest_preceding_main(self) -> int:
        """Index of the last main task, scanning backward from the end."""
        for index in range(len(self.tasks) - 1, -1, -1):
            if not self.tasks[index].is_sub:
                return index
        raise NoMainTaskError()

    def toggle_done(self, index: int) -> None:
        """Mark a task completed; a main task also completes its direct sub-tasks."""
        task = self.tasks[self._check_index(index)]
        task.complete()
        if task.is_sub:
            return
        for child in self.children(index):
            child.complete()

    def remove(self, index: int) -> List[Task]:
        """
        Remove a task together with all of its descendants.

        Descendants are found by walking parent links from ``index``. Removal
        then goes highest index first so pending indices never shift before
        they are consumed.

        Returns:
            The removed tasks, in list order.
        """
        self._check_index(index)

        doomed = {index} | self._descendants(index)
        removed = []
        for position in sorted(doomed, reverse=True):
            removed.append(self._delete_at(position))

        logger.debug(f"Removed task {index} and {len(removed) - 1} descendants")
        return list(reversed(removed))

    def children(self, index: int) -> List[Task]:
        """Get the direct sub-tasks of the task at ``index``."""
        return [task for task in self.tasks if task.is_child_of(index)]

    def main_tasks(self) -> List[int]:
        """Get the indices of all main tasks."""
        return [i for i, task in enumerate(self.tasks) if not task.is_sub]

    def stats(self) -> Dict[str, int]:
        stats = super().stats()
        stats["main"] = sum(1 for task in self.tasks if not task.is_sub)
        stats["sub"] = stats["total"] - stats["main"]
        return stats

    def _descendants(self, index: int) -> Set[int]:
        """Positions reachable from ``index`` through parent links."""
        graph = nx.DiGraph()
        graph.add_nodes_from(range(len(self.tasks)))
        for position, task in enumerate(self.tasks):
            if task.is_sub and task.parent is not None:
                graph.add_edge(task.parent, position)
        return set(nx.descendants(graph, index)) - {index}

    def _delete_at(self, position: int) -> Task:
        """Pop one task and shift parent indices that pointed past it."""
        task = self.tasks.pop(position)
        for other in self.tasks:
            if other.parent is not None and other.parent > position:
                other.parent -= 1
        return task

    @staticmethod
    def _build(factory, *args) -> Task:
        try:
            return factory(*args)
        except ValidationError as e:
            raise InvalidTaskNameError(f"Invalid task name {args[0]!r}: {e.errors()[0]['msg']}") from e


class FlatTaskStore(_IndexedStore):
    """Plain ordered task list without sub-tasks."""

    tasks: List[FlatTask]

    def add(self, name: str, description: str = "") -> FlatTask:
        """Append a new task."""
        try:
            task = FlatTask(name=name, description=description)
        except ValidationError as e:
            raise InvalidTaskNameError(f"Invalid task {name!r}: {e.errors()[0]['msg']}") from e
        self.tasks.append(task)
        logger.debug(f"Added task {len(self.tasks) - 1}: {name!r}")
        return task

    def toggle_done(self, index: int) -> None:
        """Mark the task at ``index`` as completed."""
        self.tasks[self._check_index(index)].complete()

    def remove(self, index: int) -> FlatTask:
        """Remove the task at ``index``."""
        return self.tasks.pop(self._check_index(index))
