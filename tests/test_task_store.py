# tests/test_task_store.py

from __future__ import annotations

import pytest

from todo_tree.errors import IndexOutOfRange, InvalidTaskNameError, NoMainTaskError
from todo_tree.task_node import Task
from todo_tree.task_store import FlatTaskStore, TaskStore


def _snapshot(store: TaskStore) -> list[dict]:
    return [task.model_dump() for task in store]


def test_add_main_appends_main_tasks() -> None:
    store = TaskStore()
    for name in ["one", "two", "", "four"]:
        store.add_main(name)

    assert len(store) == 4
    assert all(not t.is_sub and t.parent is None and not t.is_completed for t in store)


def test_add_sub_anchors_to_nearest_main(store: TaskStore) -> None:
    assert store[1].parent == 0
    assert store[3].parent == 2

    store.add_sub("E")
    assert store[4].parent == 2


def test_add_sub_keeps_parent_from_insertion_time() -> None:
    store = TaskStore()
    store.add_main("A")
    store.add_main("B")
    store.add_sub("b1")
    store.add_main("C")

    assert store[2].parent == 1


def test_add_sub_without_main_task_fails() -> None:
    with pytest.raises(NoMainTaskError):
        TaskStore().add_sub("orphan")

    only_orphans = TaskStore([Task(name="x", is_sub=True)])
    with pytest.raises(NoMainTaskError):
        only_orphans.add_sub("y")
    assert len(only_orphans) == 1


def test_add_rejects_separator_in_name() -> None:
    store = TaskStore()
    with pytest.raises(InvalidTaskNameError):
        store.add_main("milk, eggs")
    assert len(store) == 0


def test_toggle_done_cascades_to_direct_children() -> None:
    store = TaskStore()
    store.add_main("Test")
    store.add_sub("Sub")
    store.add_sub("Sub2")
    store.add_main("Other")
    store.add_sub("Other sub")

    store.toggle_done(0)

    assert [t.is_completed for t in store] == [True, True, True, False, False]


def test_toggle_done_on_sub_task_does_not_touch_siblings(store: TaskStore) -> None:
    store.add_sub("E")
    store.toggle_done(3)

    assert store[3].is_completed
    assert not store[2].is_completed
    assert not store[4].is_completed


def test_toggle_undone_never_cascades(store: TaskStore) -> None:
    store.toggle_done(0)
    store.toggle_undone(0)

    assert not store[0].is_completed
    assert store[1].is_completed


def test_toggle_done_out_of_range_leaves_store_unchanged() -> None:
    store = TaskStore()
    store.add_main("A")
    store.add_sub("B")
    store.add_main("C")
    before = _snapshot(store)

    with pytest.raises(IndexOutOfRange):
        store.toggle_done(5)
    with pytest.raises(IndexOutOfRange):
        store.toggle_undone(3)
    with pytest.raises(IndexOutOfRange):
        store.remove(-1)

    assert _snapshot(store) == before


def test_remove_main_task_removes_its_children(store: TaskStore) -> None:
    removed = store.remove(0)

    assert [t.name for t in removed] == ["A", "B"]
    assert [t.name for t in store] == ["C", "D"]
    assert store[0].parent is None
    assert store[1].is_sub
    assert store[1].parent == 0


def test_remove_keeps_parent_links_coherent_for_later_commands() -> None:
    store = TaskStore()
    store.add_main("A")
    store.add_sub("a1")
    store.add_main("B")
    store.add_sub("b1")
    store.add_sub("b2")

    store.remove(0)
    store.toggle_done(0)

    assert [t.name for t in store] == ["B", "b1", "b2"]
    assert all(t.is_completed for t in store)


def test_remove_sub_task_only_removes_it(store: TaskStore) -> None:
    store.remove(1)

    assert [t.name for t in store] == ["A", "C", "D"]
    assert store[2].parent == 1


def test_remove_main_task_with_eleven_sub_tasks() -> None:
    store = TaskStore()
    store.add_main("main")
    for i in range(11):
        store.add_sub(f"sub{i}")

    store.remove(0)

    assert len(store) == 0


def test_remove_second_main_task_with_many_sub_tasks() -> None:
    store = TaskStore()
    store.add_main("main")
    store.add_sub("sub")
    store.add_main("main1")
    for i in range(1, 11):
        store.add_sub(f"sub{i}")

    store.remove(2)

    assert [t.name for t in store] == ["main", "sub"]
    assert store[1].parent == 0


def test_remove_follows_sub_tasks_anchored_to_sub_tasks() -> None:
    # Not produced by add_sub, but a hand-edited file can contain it.
    store = TaskStore(
        [
            Task(name="A"),
            Task(name="a1", is_sub=True, parent=0),
            Task(name="a1x", is_sub=True, parent=1),
            Task(name="B"),
        ]
    )

    store.remove(0)

    assert [t.name for t in store] == ["B"]


def test_complete_all_and_clear_all(store: TaskStore) -> None:
    store.complete_all()
    assert all(t.is_completed for t in store)

    store.clear_all()
    assert len(store) == 0


def test_stats(store: TaskStore) -> None:
    store.toggle_done(2)

    assert store.stats() == {"total": 4, "completed": 2, "pending": 2, "main": 2, "sub": 2}


def test_flat_store_operations() -> None:
    store = FlatTaskStore()
    store.add("Buy milk", "semi-skimmed")
    store.add("Call mum")

    store.toggle_done(1)
    assert store[1].completed
    store.toggle_undone(1)
    assert not store[1].completed

    removed = store.remove(0)
    assert removed.name == "Buy milk"
    assert [t.name for t in store] == ["Call mum"]

    with pytest.raises(IndexOutOfRange):
        store.toggle_done(1)

    store.complete_all()
    assert store.stats() == {"total": 1, "completed": 1, "pending": 0}
    store.clear_all()
    assert len(store) == 0
