# src/taskpad/tasks/task_store.py

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

from ..storage.errors import StorageReadError
from .task_models import Task

if TYPE_CHECKING:
    from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_TASKS_KEY = "tasks"


class TaskStore:
    """
    Owner of the task collection.

    The whole collection lives under one key in a KeyValueStore as a JSON array
    and is rewritten on every mutation (no partial writes).

    Consistency:
    - a mutation builds the new list, writes it, and only then publishes it;
      if the write raises StorageWriteError the in-memory list is unchanged
    - callers only ever see immutable snapshots (tuple of frozen Task)

    Thread-safety:
    - read-modify-write sequences are serialized by a per-store lock
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_TASKS_KEY,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._kv = kv
        self._key = key
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._lock = threading.RLock()
        self._tasks: tuple[Task, ...] = ()

    # ---- low-level helpers ----

    @staticmethod
    def _encode(tasks: Iterable[Task]) -> str:
        return json.dumps([t.to_record() for t in tasks])

    def _decode(self, raw: str) -> tuple[Task, ...]:
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise StorageReadError(f"stored tasks are not valid JSON: {e}", key=self._key) from e
        if not isinstance(data, list):
            raise StorageReadError(
                f"stored tasks must be a JSON array, got {type(data).__name__}", key=self._key
            )

        out: list[Task] = []
        seen: set[str] = set()
        for item in data:
            try:
                task = Task.from_record(item)
            except ValueError as e:
                raise StorageReadError(f"bad task record: {e}", key=self._key) from e
            if task.id in seen:
                raise StorageReadError(f"duplicate task id {task.id}", key=self._key)
            seen.add(task.id)
            out.append(task)
        return tuple(out)

    def _read(self) -> tuple[Task, ...]:
        raw = self._kv.get(self._key)
        if raw is None or raw.strip() == "":
            return ()
        return self._decode(raw)

    def _commit(self, new_tasks: tuple[Task, ...]) -> None:
        # StorageWriteError propagates before the new list is published.
        self._kv.set(self._key, self._encode(new_tasks))
        self._tasks = new_tasks

    def _new_id(self) -> str:
        taken = {t.id for t in self._tasks}
        while True:
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate
            logger.warning("Generated task id collided with an existing one; retrying.")

    def _index_of(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    # ---- public API ----

    def load(self, *, strict: bool = False) -> tuple[Task, ...]:
        """
        Replace the in-memory collection with the persisted one.

        Absent data means an empty collection. Unreadable or malformed data
        raises StorageReadError when strict=True; otherwise it is logged and
        the store starts empty.
        """
        with self._lock:
            try:
                tasks = self._read()
            except StorageReadError:
                if strict:
                    raise
                logger.exception("Failed to load tasks from key=%s; starting empty.", self._key)
                tasks = ()
            self._tasks = tasks
            logger.info(
                "TaskStore loaded key=%s total=%d completed=%d",
                self._key,
                len(tasks),
                self.count_completed(),
            )
            return tasks

    def snapshot(self) -> tuple[Task, ...]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def count_completed(self) -> int:
        return sum(1 for t in self._tasks if t.is_completed)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def add(self, raw_text: str) -> Task | None:
        text = (raw_text or "").strip()
        if not text:
            return None

        with self._lock:
            task = Task(id=self._new_id(), text=text, is_completed=False)
            self._commit((*self._tasks, task))
            logger.debug("Task added id=%s total=%d", task.id, len(self._tasks))
            return task

    def update(self, task_id: str, new_text: str) -> bool:
        """
        Replace the text of a task, keeping its completion state and position.

        Returns False (and writes nothing) for an unknown id or blank text.
        """
        text = (new_text or "").strip()
        if not text:
            return False

        with self._lock:
            idx = self._index_of(task_id)
            if idx < 0:
                return False
            tasks = list(self._tasks)
            tasks[idx] = replace(tasks[idx], text=text)
            self._commit(tuple(tasks))
            logger.debug("Task updated id=%s", task_id)
            return True

    def toggle_complete(self, task_id: str) -> Task | None:
        with self._lock:
            idx = self._index_of(task_id)
            if idx < 0:
                return None
            tasks = list(self._tasks)
            updated = replace(tasks[idx], is_completed=not tasks[idx].is_completed)
            tasks[idx] = updated
            self._commit(tuple(tasks))
            logger.debug("Task toggled id=%s completed=%s", task_id, updated.is_completed)
            return updated

    def remove(self, task_id: str) -> bool:
        with self._lock:
            idx = self._index_of(task_id)
            if idx < 0:
                return False
            self._commit(self._tasks[:idx] + self._tasks[idx + 1 :])
            logger.debug("Task removed id=%s total=%d", task_id, len(self._tasks))
            return True

    def filter(self, query: str) -> tuple[Task, ...]:
        """Case-insensitive substring match on task text. Empty query returns everything."""
        tasks = self._tasks
        if not query:
            return tasks
        needle = query.casefold()
        return tuple(t for t in tasks if needle in t.text.casefold())
