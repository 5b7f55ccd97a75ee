# src/todo_app/storage/sqlite_gateway.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..core.errors import StorageUnavailable

logger = logging.getLogger(__name__)


class SqliteGateway:
    """
    SQLite key-value slot.

    Schema: kv(key TEXT PRIMARY KEY, value TEXT NOT NULL, updated_at REAL NOT NULL),
    created if missing on first use.

    Each call opens its own short-lived connection in a worker thread.
    """

    def __init__(self, db_path: str | Path = "todo.sqlite3", key: str = "tasks") -> None:
        if not key or not key.strip():
            raise ValueError("key is required")
        self._db_path = Path(db_path)
        self._key = key.strip()
        self._schema_ready = False

    async def read_all(self) -> str | None:
        return await asyncio.to_thread(self._read_sync)

    async def write_all(self, serialized: str) -> None:
        await asyncio.to_thread(self._write_sync, serialized)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        if not self._schema_ready:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
            self._schema_ready = True
            logger.info("SqliteGateway ready db=%s key=%s", self._db_path, self._key)
        return conn

    def _read_sync(self) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (self._key,)).fetchone()
                return str(row["value"]) if row else None
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageUnavailable(f"cannot read key {self._key!r} from {self._db_path}: {e}") from e

    def _write_sync(self, serialized: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self._key, serialized, time.time()),
                )
                conn.commit()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageUnavailable(f"cannot write key {self._key!r} to {self._db_path}: {e}") from e
