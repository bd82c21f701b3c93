# src/taskpad/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..auth.session import SessionStore
from ..tasks.task_models import Task
from ..tasks.task_store import TaskStore
from .ports import ConfirmDialog, KeyValueStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    kv: KeyValueStore
    task_store: TaskStore
    session: SessionStore
    confirm: ConfirmDialog

    # UI view state: current search text and the list as last shown.
    search_text: str = ""
    shown: tuple[Task, ...] = ()

    lock: threading.RLock = field(default_factory=threading.RLock)

    def visible_tasks(self) -> tuple[Task, ...]:
        """Refresh the read-only projection the console renders and indexes into."""
        self.shown = self.task_store.filter(self.search_text)
        return self.shown
