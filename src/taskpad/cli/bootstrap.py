# src/taskpad/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/tasks/session/dialog),
- loads the persisted task list.
"""

from __future__ import annotations

import logging

from ..auth.session import SessionStore
from ..config import get_settings
from ..connectors.console_connector import ConsoleConfirmDialog
from ..core.ports import ConfirmDialog
from ..core.state import AppState
from ..storage.kv_store import SqliteKVStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, confirm: ConfirmDialog | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kv = SqliteKVStore(settings.storage_db_path)
    task_store = TaskStore(kv, key=settings.tasks_key)
    task_store.load()

    return AppState(
        settings=settings,
        kv=kv,
        task_store=task_store,
        session=SessionStore(kv, key=settings.token_key),
        confirm=confirm or ConsoleConfirmDialog(),
    )
