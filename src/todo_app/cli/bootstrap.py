# src/todo_app/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- picks the persistence gateway and wires it into the TaskStore / AppState.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import STORAGE_BACKENDS, get_settings
from ..core.ports import TaskGateway
from ..core.state import AppState
from ..storage.file_gateway import JsonFileGateway
from ..storage.sqlite_gateway import SqliteGateway
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)


def build_gateway(settings) -> TaskGateway:
    backend = str(getattr(settings, "storage_backend", "file")).lower()
    key = getattr(settings, "storage_key", "tasks")

    if backend not in STORAGE_BACKENDS:
        logger.warning("Unknown storage backend %r; using 'file'.", backend)
        backend = "file"

    if backend == "sqlite":
        return SqliteGateway(settings.db_path, key=key)
    return JsonFileGateway(settings.data_dir, key=key)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The store is not loaded here; the connector awaits store.load() inside its event loop.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return AppState(settings=settings, store=TaskStore(build_gateway(settings)))
