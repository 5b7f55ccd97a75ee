# src/todo_app/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

from ..core.errors import MalformedPersistedData, StorageUnavailable
from ..core.ports import TaskGateway
from .task_codec import dump_tasks, load_tasks
from .task_models import LoadStatus, Priority, Task, new_task_id

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Single owner of the in-memory task collection.

    Lifecycle:
    - await load() once at startup (reads the gateway, starts the writer)
    - mutate with add/remove/edit/toggle_complete (synchronous)
    - await close() on shutdown (drains pending writes)

    Write-back:
    - every mutation that changes state enqueues a full snapshot of the collection
    - one writer coroutine drains the queue in FIFO order, so writes hit the gateway
      in mutation order and the last completed write is always the newest state
    - a failed write is logged and not retried; memory stays authoritative

    Unknown ids and blank text are silent no-ops (no error, no write).
    """

    def __init__(
        self,
        gateway: TaskGateway,
        *,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._gateway = gateway
        self._id_factory = id_factory
        self._tasks: list[Task] = []
        self._issued_ids: set[str] = set()
        self._load_status: LoadStatus | None = None
        self._pending: asyncio.Queue[str] = asyncio.Queue()
        self._writer: asyncio.Task[None] | None = None

    @property
    def load_status(self) -> LoadStatus | None:
        return self._load_status

    # ---- startup / shutdown ----

    async def load(self) -> LoadStatus:
        """
        Read the persisted collection and become the source of truth.

        Never raises on storage problems: unreachable storage or malformed data
        is logged and the store starts empty (LoadStatus.RECOVERED).
        """
        if self._load_status is not None:
            logger.warning("TaskStore.load() called again; keeping current state.")
            return self._load_status

        tasks: list[Task] = []
        try:
            raw = await self._gateway.read_all()
            if raw is None:
                status = LoadStatus.FRESH
            else:
                tasks = load_tasks(raw, id_factory=self._id_factory)
                status = LoadStatus.LOADED
        except StorageUnavailable:
            logger.error("Task storage unavailable; starting with an empty list.", exc_info=True)
            status = LoadStatus.RECOVERED
        except MalformedPersistedData:
            logger.error("Stored tasks are malformed; starting with an empty list.", exc_info=True)
            status = LoadStatus.RECOVERED
        except Exception:
            logger.exception("Unexpected error loading tasks; starting with an empty list.")
            status = LoadStatus.RECOVERED

        self._tasks = tasks
        self._issued_ids.update(t.id for t in tasks)
        self._load_status = status
        self._ensure_writer()

        logger.info("TaskStore ready status=%s total=%d", status.value, len(tasks))
        return status

    async def flush(self) -> None:
        """Wait until every queued write has been attempted."""
        self._ensure_writer()
        await self._pending.join()

    async def close(self) -> None:
        if self._writer is None:
            return
        await self.flush()
        writer, self._writer = self._writer, None
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer

    # ---- queries ----

    def list(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return self._tasks[idx] if idx is not None else None

    # ---- mutations ----

    def add(self, text: str) -> Task | None:
        self._require_loaded()
        if not text.strip():
            logger.debug("Ignoring add with blank text.")
            return None

        task = Task(id=self._new_id(), text=text)
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)
        self._schedule_write()
        return task

    def remove(self, task_id: str) -> None:
        self._require_loaded()
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("remove: no task id=%s", task_id)
            return

        del self._tasks[idx]
        logger.debug("Task removed id=%s", task_id)
        self._schedule_write()

    def edit(self, task_id: str, text: str, priority: Priority | str) -> None:
        """Replace text and priority together; id and completed are kept."""
        self._require_loaded()
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("edit: no task id=%s", task_id)
            return

        new_priority = Priority(priority)

        old = self._tasks[idx]
        self._tasks[idx] = Task(id=old.id, text=text, priority=new_priority, completed=old.completed)
        logger.debug("Task edited id=%s priority=%s", task_id, new_priority.value)
        self._schedule_write()

    def toggle_complete(self, task_id: str) -> None:
        self._require_loaded()
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug("toggle_complete: no task id=%s", task_id)
            return

        old = self._tasks[idx]
        self._tasks[idx] = Task(id=old.id, text=old.text, priority=old.priority, completed=not old.completed)
        logger.debug("Task toggled id=%s completed=%s", task_id, not old.completed)
        self._schedule_write()

    # ---- internals ----

    def _require_loaded(self) -> None:
        # Writing before load() would overwrite stored tasks with a partial snapshot.
        if self._load_status is None:
            raise RuntimeError("TaskStore.load() must be awaited before mutating tasks")

    def _index_of(self, task_id: str) -> int | None:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        return None

    def _new_id(self) -> str:
        while True:
            task_id = self._id_factory()
            if task_id not in self._issued_ids:
                self._issued_ids.add(task_id)
                return task_id
            logger.warning("Id factory returned a used id %s; retrying.", task_id)

    def _schedule_write(self) -> None:
        self._pending.put_nowait(dump_tasks(self._tasks))
        with contextlib.suppress(RuntimeError):
            # No running loop: the snapshot waits in the queue until flush().
            self._ensure_writer()

    def _ensure_writer(self) -> None:
        if self._writer is not None and not self._writer.done():
            return
        self._writer = asyncio.get_running_loop().create_task(
            self._write_loop(), name="task-store-writer"
        )

    async def _write_loop(self) -> None:
        while True:
            payload = await self._pending.get()
            try:
                await self._gateway.write_all(payload)
            except StorageUnavailable:
                logger.error("Task write-back failed; keeping in-memory state.", exc_info=True)
            except Exception:
                logger.exception("Unexpected error during task write-back.")
            finally:
                self._pending.task_done()
