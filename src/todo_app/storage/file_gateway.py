# src/todo_app/storage/file_gateway.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path

from ..core.errors import StorageUnavailable

logger = logging.getLogger(__name__)


class JsonFileGateway:
    """
    One JSON file per key: <data_dir>/<key>.json.

    Writes go to a temp file first and are moved into place with os.replace,
    so a crash mid-write never leaves a torn file behind.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, data_dir: str | Path, key: str = "tasks") -> None:
        if not key or not key.strip():
            raise ValueError("key is required")
        self._path = Path(data_dir) / f"{key.strip()}.json"

    @property
    def path(self) -> Path:
        return self._path

    async def read_all(self) -> str | None:
        return await asyncio.to_thread(self._read_sync)

    async def write_all(self, serialized: str) -> None:
        await asyncio.to_thread(self._write_sync, serialized)

    def _read_sync(self) -> str | None:
        try:
            return self._path.read_text("utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageUnavailable(f"cannot read {self._path}: {e}") from e

    def _write_sync(self, serialized: str) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(serialized, "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageUnavailable(f"cannot write {self._path}: {e}") from e

        with contextlib.suppress(OSError):
            # Best-effort: personal data, keep the file private on disk.
            os.chmod(self._path, 0o600)
        logger.debug("Wrote %d bytes to %s", len(serialized), self._path)
