# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpad.auth.session import SessionStore
from taskpad.core.state import AppState
from taskpad.tasks.task_store import TaskStore

from .fakes import FakeKVStore, ScriptedConfirm


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskpad-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_db_path=tmp_path / "storage.sqlite3",
        tasks_key="tasks",
        token_key="userToken",
        confirm_delete=True,
        require_login=False,
    )


@pytest.fixture()
def kv() -> FakeKVStore:
    return FakeKVStore()


@pytest.fixture()
def store(kv: FakeKVStore) -> TaskStore:
    s = TaskStore(kv)
    s.load()
    return s


@pytest.fixture()
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(answer=True)


@pytest.fixture()
def state(settings: SimpleNamespace, kv: FakeKVStore, store: TaskStore, confirm: ScriptedConfirm) -> AppState:
    """AppState wired with the in-memory KV store and a scripted confirm dialog."""
    return AppState(
        settings=settings,
        kv=kv,
        task_store=store,
        session=SessionStore(kv, key=settings.token_key),
        confirm=confirm,
    )
