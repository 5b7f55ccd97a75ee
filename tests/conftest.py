# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_app.core.state import AppState
from todo_app.tasks.task_store import TaskStore

from .fakes import FakeGateway, counter_ids


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        log_to_file=False,
        storage_backend="file",
        storage_key="tasks",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "todo.sqlite3",
    )


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def store(gateway: FakeGateway) -> TaskStore:
    """Unloaded store over the fake gateway; tests await store.load() themselves."""
    return TaskStore(gateway, id_factory=counter_ids())


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore) -> AppState:
    return AppState(settings=settings, store=store)
