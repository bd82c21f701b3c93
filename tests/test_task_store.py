# tests/test_task_store.py

from __future__ import annotations

import json
import threading
from itertools import count

import pytest

from taskpad.storage.errors import StorageReadError, StorageWriteError
from taskpad.tasks.task_models import Task
from taskpad.tasks.task_store import TaskStore

from .fakes import FakeKVStore


def _stored(kv: FakeKVStore, key: str = "tasks") -> list[dict]:
    return json.loads(kv.data[key])


def test_add_scenario_toggle_update_remove(store: TaskStore, kv: FakeKVStore) -> None:
    task = store.add("Buy milk")
    assert task is not None
    assert task.text == "Buy milk"
    assert task.is_completed is False
    assert _stored(kv) == [{"id": task.id, "text": "Buy milk", "isCompleted": False}]

    toggled = store.toggle_complete(task.id)
    assert toggled is not None and toggled.is_completed is True

    assert store.update(task.id, "Buy oat milk") is True
    current = store.get(task.id)
    assert current == Task(id=task.id, text="Buy oat milk", is_completed=True)

    assert store.remove(task.id) is True
    assert store.snapshot() == ()
    assert _stored(kv) == []


def test_add_many_gives_distinct_ids_in_insertion_order(store: TaskStore) -> None:
    texts = ["one", "  ", "two", "", "three", "\t\n", "four"]
    for t in texts:
        store.add(t)

    tasks = store.snapshot()
    assert [t.text for t in tasks] == ["one", "two", "three", "four"]
    assert len({t.id for t in tasks}) == len(tasks)


@pytest.mark.parametrize("raw", ["", "   ", "\t", "\n  \n"])
def test_add_blank_is_noop_without_write(store: TaskStore, kv: FakeKVStore, raw: str) -> None:
    store.add("keep me")
    writes_before = len(kv.writes)

    assert store.add(raw) is None
    assert [t.text for t in store.snapshot()] == ["keep me"]
    assert len(kv.writes) == writes_before


def test_add_trims_text(store: TaskStore) -> None:
    task = store.add("   walk the dog  ")
    assert task is not None
    assert task.text == "walk the dog"


def test_new_id_retries_on_collision(kv: FakeKVStore) -> None:
    ids = iter(["a", "a", "b"])
    store = TaskStore(kv, id_factory=lambda: next(ids))
    store.load()

    first = store.add("first")
    second = store.add("second")
    assert first is not None and second is not None
    assert (first.id, second.id) == ("a", "b")


def test_toggle_twice_restores_original(store: TaskStore) -> None:
    task = store.add("stretch")
    assert task is not None

    store.toggle_complete(task.id)
    back = store.toggle_complete(task.id)
    assert back is not None
    assert back.is_completed is task.is_completed


def test_update_keeps_position_and_completion(store: TaskStore) -> None:
    a = store.add("A")
    b = store.add("B")
    c = store.add("C")
    assert a and b and c
    store.toggle_complete(b.id)

    assert store.update(b.id, "  B2 ") is True
    tasks = store.snapshot()
    assert [t.text for t in tasks] == ["A", "B2", "C"]
    assert tasks[1].is_completed is True


def test_update_unknown_or_blank_does_not_write(store: TaskStore, kv: FakeKVStore) -> None:
    task = store.add("x")
    assert task is not None
    writes_before = len(kv.writes)

    assert store.update("missing", "y") is False
    assert store.update(task.id, "   ") is False
    assert store.get(task.id) == task
    assert len(kv.writes) == writes_before


def test_toggle_unknown_returns_none_without_write(store: TaskStore, kv: FakeKVStore) -> None:
    store.add("x")
    writes_before = len(kv.writes)
    assert store.toggle_complete("missing") is None
    assert len(kv.writes) == writes_before


def test_remove_unknown_leaves_collection_and_storage(store: TaskStore, kv: FakeKVStore) -> None:
    store.add("x")
    before = store.snapshot()
    stored_before = kv.data["tasks"]
    writes_before = len(kv.writes)

    assert store.remove("missing") is False
    assert store.snapshot() == before
    assert kv.data["tasks"] == stored_before
    assert len(kv.writes) == writes_before


def test_remove_preserves_relative_order(store: TaskStore) -> None:
    tasks = [store.add(t) for t in ("1", "2", "3", "4")]
    assert all(tasks)
    assert store.remove(tasks[1].id) is True
    assert [t.text for t in store.snapshot()] == ["1", "3", "4"]


def test_filter_is_case_insensitive_and_pure(store: TaskStore, kv: FakeKVStore) -> None:
    store.add("Task A")
    store.add("Task B")
    writes_before = len(kv.writes)

    result = store.filter("b")
    assert [t.text for t in result] == ["Task B"]
    assert [t.text for t in store.filter("TASK")] == ["Task A", "Task B"]
    assert [t.text for t in store.snapshot()] == ["Task A", "Task B"]
    assert len(kv.writes) == writes_before


def test_filter_empty_returns_everything_in_order(store: TaskStore) -> None:
    for t in ("c", "a", "b"):
        store.add(t)
    assert store.filter("") == store.snapshot()


def test_load_round_trips_last_write(kv: FakeKVStore) -> None:
    store = TaskStore(kv)
    store.load()
    a = store.add("alpha")
    b = store.add("beta")
    assert a and b
    store.toggle_complete(a.id)
    store.update(b.id, "beta two")
    store.add("gamma")
    store.remove(a.id)

    reloaded = TaskStore(kv)
    assert reloaded.load() == store.snapshot()


def test_load_absent_is_empty(kv: FakeKVStore) -> None:
    store = TaskStore(kv)
    assert store.load() == ()
    assert len(store) == 0


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"id": "1"}',
        '[{"id": "1", "text": ""}]',
        '[{"text": "no id"}]',
        '[{"id": "1", "text": "a"}, {"id": "1", "text": "b"}]',
        '[{"id": "1", "text": "a", "isCompleted": "false"}]',
        '[{"id": "1", "title": "a", "complete": 1}]',
        pytest.param("[" * 200_000 + "]" * 200_000, id="deeply-nested"),
    ],
)
def test_load_malformed_falls_back_to_empty(kv: FakeKVStore, raw: str) -> None:
    kv.data["tasks"] = raw
    store = TaskStore(kv)
    assert store.load() == ()

    with pytest.raises(StorageReadError):
        store.load(strict=True)


def test_load_read_failure_falls_back_to_empty(kv: FakeKVStore) -> None:
    kv.data["tasks"] = json.dumps([{"id": "1", "text": "a", "isCompleted": False}])
    kv.fail_reads = True
    store = TaskStore(kv)
    assert store.load() == ()


def test_load_accepts_legacy_title_complete_records(kv: FakeKVStore) -> None:
    kv.data["tasks"] = json.dumps(
        [
            {"id": "1700000000000", "title": "old style", "complete": True},
            {"id": "b", "text": "new style", "isCompleted": False},
        ]
    )
    store = TaskStore(kv)
    tasks = store.load()
    assert tasks == (
        Task(id="1700000000000", text="old style", is_completed=True),
        Task(id="b", text="new style", is_completed=False),
    )

    store.toggle_complete("b")
    assert _stored(kv)[0] == {"id": "1700000000000", "text": "old style", "isCompleted": True}


def test_write_failure_keeps_memory_in_step_with_storage(store: TaskStore, kv: FakeKVStore) -> None:
    task = store.add("saved")
    assert task is not None
    before = store.snapshot()
    stored_before = kv.data["tasks"]

    kv.fail_writes = True
    with pytest.raises(StorageWriteError):
        store.add("not saved")
    with pytest.raises(StorageWriteError):
        store.toggle_complete(task.id)
    with pytest.raises(StorageWriteError):
        store.update(task.id, "changed")
    with pytest.raises(StorageWriteError):
        store.remove(task.id)

    assert store.snapshot() == before
    assert kv.data["tasks"] == stored_before

    kv.fail_writes = False
    assert store.add("saved later") is not None
    assert [t.text for t in TaskStore(kv).load()] == ["saved", "saved later"]


def test_snapshot_is_immutable(store: TaskStore) -> None:
    store.add("x")
    snap = store.snapshot()
    assert isinstance(snap, tuple)
    with pytest.raises(AttributeError):
        snap[0].text = "y"  # type: ignore[misc]


def test_custom_key_is_used(kv: FakeKVStore) -> None:
    ids = count(1)
    store = TaskStore(kv, key="my_tasks", id_factory=lambda: f"t{next(ids)}")
    store.load()
    store.add("x")
    assert "tasks" not in kv.data
    assert _stored(kv, "my_tasks") == [{"id": "t1", "text": "x", "isCompleted": False}]


def test_concurrent_adds_are_serialized(store: TaskStore, kv: FakeKVStore) -> None:
    n_threads, per_thread = 8, 25
    start = threading.Barrier(n_threads)

    def worker(n: int) -> None:
        start.wait()
        for i in range(per_thread):
            store.add(f"worker {n} item {i}")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(n_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    tasks = store.snapshot()
    assert len(store) == n_threads * per_thread
    assert len({t.id for t in tasks}) == len(tasks)
    assert TaskStore(kv).load() == tasks
    for n in range(n_threads):
        own = [t.text for t in tasks if t.text.startswith(f"worker {n} ")]
        assert own == [f"worker {n} item {i}" for i in range(per_thread)]
