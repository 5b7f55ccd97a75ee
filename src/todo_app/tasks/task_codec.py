# src/todo_app/tasks/task_codec.py

"""
JSON codec for the persisted task collection.

Layout: a JSON array of flat objects {id, text, priority, completed}, in
collection order. There is no version field, so reading is lenient:
- missing priority/completed take their creation defaults,
- missing id gets a fresh one (duplicates too, ids must stay unique),
- older builds stored the text under "value"; it is accepted when "text" is absent,
- records with no text, or non-string text, are skipped.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..core.errors import MalformedPersistedData
from .task_models import Priority, Task, new_task_id

logger = logging.getLogger(__name__)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "priority": task.priority.value,
        "completed": task.completed,
    }


def record_to_task(
    record: Mapping[str, Any], *, id_factory: Callable[[], str] = new_task_id
) -> Task | None:
    text = record.get("text")
    if text is None:
        text = record.get("value")
    if not isinstance(text, str):
        return None

    raw_id = record.get("id")
    task_id = str(raw_id) if raw_id not in (None, "") else id_factory()

    completed = record.get("completed", False)

    return Task(
        id=task_id,
        text=text,
        priority=Priority.from_raw(record.get("priority")),
        completed=completed if isinstance(completed, bool) else False,
    )


def dump_tasks(tasks: Iterable[Task]) -> str:
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False)


def load_tasks(raw: str, *, id_factory: Callable[[], str] = new_task_id) -> list[Task]:
    """Parse a stored blob. Raises MalformedPersistedData if it is not a task list."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedPersistedData(f"stored tasks are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedPersistedData(
            f"stored tasks must be a JSON array, got {type(data).__name__}"
        )

    out: list[Task] = []
    seen: set[str] = set()
    for idx, record in enumerate(data):
        if not isinstance(record, dict):
            raise MalformedPersistedData(
                f"task record #{idx} must be an object, got {type(record).__name__}"
            )

        task = record_to_task(record, id_factory=id_factory)
        if task is None:
            logger.warning("Skipping stored task #%d without string text", idx)
            continue

        if task.id in seen:
            fresh_id = id_factory()
            logger.warning("Duplicate task id %s in stored data; reassigned %s", task.id, fresh_id)
            task = Task(id=fresh_id, text=task.text, priority=task.priority, completed=task.completed)

        seen.add(task.id)
        out.append(task)

    return out
