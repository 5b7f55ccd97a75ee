# src/todo_app/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_filter import FilterSelector, apply_filter
from ..tasks.task_models import Priority, Task
from ..tasks.task_store import TaskStore


@dataclass(slots=True)
class EditingDraft:
    """
    Copy of one task's editable fields while the user edits it.

    Presentation-only: the store sees nothing until the draft is saved
    with a single edit(task_id, text, priority) call.
    """

    task_id: str
    text: str
    priority: Priority

    @classmethod
    def from_task(cls, task: Task) -> EditingDraft:
        return cls(task_id=task.id, text=task.text, priority=task.priority)


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object
    store: TaskStore

    # Transient UI state, never persisted.
    filter: FilterSelector = FilterSelector.ALL
    draft: EditingDraft | None = None

    def visible_tasks(self) -> list[Task]:
        return apply_filter(self.store.list(), self.filter)
