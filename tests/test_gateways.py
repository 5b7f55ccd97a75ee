# tests/test_gateways.py

from __future__ import annotations

from pathlib import Path

import pytest

from todo_app.core.errors import StorageUnavailable
from todo_app.storage.file_gateway import JsonFileGateway
from todo_app.storage.sqlite_gateway import SqliteGateway
from todo_app.tasks.task_models import LoadStatus, Priority
from todo_app.tasks.task_store import TaskStore


@pytest.mark.asyncio
async def test_file_gateway_read_write(tmp_path: Path) -> None:
    gw = JsonFileGateway(tmp_path / "data")
    assert await gw.read_all() is None

    await gw.write_all('[{"id": "a"}]')
    await gw.write_all("[]")

    assert gw.path == tmp_path / "data" / "tasks.json"
    assert await gw.read_all() == "[]"
    assert not gw.path.with_suffix(".tmp").exists()


@pytest.mark.asyncio
async def test_file_gateway_keys_are_separate_files(tmp_path: Path) -> None:
    a = JsonFileGateway(tmp_path, key="tasks")
    b = JsonFileGateway(tmp_path, key="archive")
    await a.write_all("[1]")

    assert await b.read_all() is None
    assert b.path.name == "archive.json"


@pytest.mark.asyncio
async def test_file_gateway_unreadable_path(tmp_path: Path) -> None:
    gw = JsonFileGateway(tmp_path)
    gw.path.mkdir()  # a directory where the file should be

    with pytest.raises(StorageUnavailable):
        await gw.read_all()


@pytest.mark.asyncio
async def test_file_gateway_unwritable_dir(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x", "utf-8")
    gw = JsonFileGateway(blocker)

    with pytest.raises(StorageUnavailable):
        await gw.write_all("[]")


@pytest.mark.asyncio
async def test_sqlite_gateway_read_write(tmp_path: Path) -> None:
    gw = SqliteGateway(tmp_path / "db" / "todo.sqlite3")
    assert await gw.read_all() is None

    await gw.write_all("[1]")
    await gw.write_all("[2]")

    assert await gw.read_all() == "[2]"
    # A second instance over the same file sees the same slot.
    assert await SqliteGateway(tmp_path / "db" / "todo.sqlite3").read_all() == "[2]"


@pytest.mark.asyncio
async def test_sqlite_gateway_keys_are_isolated(tmp_path: Path) -> None:
    db = tmp_path / "todo.sqlite3"
    await SqliteGateway(db, key="tasks").write_all("[1]")
    assert await SqliteGateway(db, key="other").read_all() is None


@pytest.mark.asyncio
async def test_sqlite_gateway_unreachable_db(tmp_path: Path) -> None:
    gw = SqliteGateway(tmp_path)  # a directory, not a database file

    with pytest.raises(StorageUnavailable):
        await gw.read_all()
    with pytest.raises(StorageUnavailable):
        await gw.write_all("[]")


def test_gateways_require_a_key(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        JsonFileGateway(tmp_path, key=" ")
    with pytest.raises(ValueError):
        SqliteGateway(tmp_path / "x.sqlite3", key="")


@pytest.mark.asyncio
@pytest.mark.parametrize("backend", ["file", "sqlite"])
async def test_store_survives_restart(tmp_path: Path, backend: str) -> None:
    def make_gateway():
        if backend == "sqlite":
            return SqliteGateway(tmp_path / "todo.sqlite3")
        return JsonFileGateway(tmp_path)

    store = TaskStore(make_gateway())
    assert await store.load() == LoadStatus.FRESH
    task = store.add("Buy milk")
    assert task is not None
    store.edit(task.id, "Buy oat milk", Priority.HIGH)
    store.toggle_complete(task.id)
    store.add("Walk dog")
    await store.close()

    restarted = TaskStore(make_gateway())
    assert await restarted.load() == LoadStatus.LOADED
    assert restarted.list() == store.list()
    await restarted.close()


@pytest.mark.asyncio
async def test_store_recovers_from_corrupt_file(tmp_path: Path) -> None:
    (tmp_path / "tasks.json").write_text("{{{", "utf-8")
    store = TaskStore(JsonFileGateway(tmp_path))

    assert await store.load() == LoadStatus.RECOVERED
    assert store.list() == ()
    await store.close()
