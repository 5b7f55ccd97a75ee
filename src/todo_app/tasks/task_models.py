# src/todo_app/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum


class Priority(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_raw(cls, raw: object) -> Priority:
        """Lenient parse used when reading stored data: unknown -> MEDIUM."""
        if not isinstance(raw, str) or not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


class LoadStatus(StrEnum):
    """
    What TaskStore.load() found.

    - fresh: nothing stored yet (first run)
    - loaded: stored collection parsed
    - recovered: storage unreachable or data malformed, started empty
    """

    FRESH = "fresh"
    LOADED = "loaded"
    RECOVERED = "recovered"


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str
    priority: Priority = Priority.MEDIUM
    completed: bool = False
