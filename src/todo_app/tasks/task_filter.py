# src/todo_app/tasks/task_filter.py

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from .task_models import Priority, Task


class FilterSelector(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, raw: str | None) -> FilterSelector | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


def matches(task: Task, selector: FilterSelector | str) -> bool:
    selector = FilterSelector(selector)
    if selector == FilterSelector.ALL:
        return True
    if selector == FilterSelector.ACTIVE:
        return not task.completed
    if selector == FilterSelector.COMPLETED:
        return task.completed
    # Priority views ignore completion.
    return task.priority == Priority(selector.value)


def apply_filter(tasks: Iterable[Task], selector: FilterSelector | str) -> list[Task]:
    """Tasks matching selector, in their original order. Unknown names raise ValueError."""
    selector = FilterSelector(selector)
    return [t for t in tasks if matches(t, selector)]


def count_by_selector(tasks: Iterable[Task]) -> dict[FilterSelector, int]:
    snapshot = list(tasks)
    return {sel: len(apply_filter(snapshot, sel)) for sel in FilterSelector}
