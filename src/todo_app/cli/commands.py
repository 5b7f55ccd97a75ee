# src/todo_app/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState, EditingDraft
from ..tasks.task_filter import FilterSelector, count_by_selector
from ..tasks.task_models import Priority, Task

CommandHandler = Callable[[AppState, str], str]

logger = logging.getLogger(__name__)

PRIORITY_MARKS: dict[Priority, str] = {
    Priority.HIGH: "!!!",
    Priority.MEDIUM: "!!",
    Priority.LOW: "!",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        name, _, rest = line[1:].strip().partition(" ")
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name.lower())
        if not handler:
            return f"Unknown command: /{name.lower()}. Use /help to list available commands."

        return handler(state, rest.strip())

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("Plain text without a leading slash adds a task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering helpers ----


def format_task(n: int, task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    marks = PRIORITY_MARKS.get(task.priority, "")
    return f"{n}. {box} {task.text}  {marks} {task.priority.value}  #{task.id[:8]}"


def render_list(state: AppState) -> str:
    visible = state.visible_tasks()
    header = f"Tasks ({state.filter.value}, {len(visible)}/{len(state.store.list())}):"
    if not visible:
        return f"{header}\n  (empty)"
    return "\n".join([header, *(f"  {format_task(i, t)}" for i, t in enumerate(visible, start=1))])


def resolve_task(state: AppState, ref: str) -> Task | None:
    """
    Resolve a user reference to a task:
    - a 1-based number is a position in the currently displayed (filtered) list
    - anything else is matched as a unique task id prefix
    """
    ref = ref.strip().lstrip("#")
    if not ref:
        return None

    if ref.isdigit():
        visible = state.visible_tasks()
        n = int(ref)
        return visible[n - 1] if 1 <= n <= len(visible) else None

    found = [t for t in state.store.list() if t.id.startswith(ref)]
    return found[0] if len(found) == 1 else None


# ---- handlers ----


def cmd_help(state: AppState, arg: str) -> str:
    return registry.build_help()


def cmd_list(state: AppState, arg: str) -> str:
    return render_list(state)


def cmd_add(state: AppState, arg: str) -> str:
    task = state.store.add(arg)
    if task is None:
        return "Nothing to add: task text is empty."
    return f"Added: {task.text}"


def cmd_toggle(state: AppState, arg: str) -> str:
    task = resolve_task(state, arg)
    if task is None:
        return f"No such task: {arg or '(missing)'}. Use /list to see numbers."
    state.store.toggle_complete(task.id)
    return f"{'Reopened' if task.completed else 'Completed'}: {task.text}"


def cmd_remove(state: AppState, arg: str) -> str:
    task = resolve_task(state, arg)
    if task is None:
        return f"No such task: {arg or '(missing)'}. Use /list to see numbers."
    state.store.remove(task.id)
    if state.draft is not None and state.draft.task_id == task.id:
        state.draft = None
    return f"Deleted: {task.text}"


def cmd_edit(state: AppState, arg: str) -> str:
    """
    /edit N  -> open an editing draft for task N
    Then /text, /priority, and finally /save or /cancel.
    """
    task = resolve_task(state, arg)
    if task is None:
        return f"No such task: {arg or '(missing)'}. Use /list to see numbers."
    state.draft = EditingDraft.from_task(task)
    return (
        f"Editing: {task.text} ({task.priority.value}).\n"
        "Use /text NEW TEXT, /priority high|medium|low, then /save or /cancel."
    )


def cmd_text(state: AppState, arg: str) -> str:
    if state.draft is None:
        return "No task is being edited. Use /edit N first."
    if not arg:
        return "Usage: /text NEW TEXT."
    state.draft.text = arg
    return f"Draft text: {arg}"


def cmd_priority(state: AppState, arg: str) -> str:
    if state.draft is None:
        return "No task is being edited. Use /edit N first."
    try:
        state.draft.priority = Priority(arg.strip().lower())
    except ValueError:
        return "Usage: /priority high|medium|low."
    return f"Draft priority: {state.draft.priority.value}"


def cmd_save(state: AppState, arg: str) -> str:
    draft = state.draft
    if draft is None:
        return "No task is being edited."
    state.draft = None
    if state.store.get(draft.task_id) is None:
        logger.debug("Draft for missing task id=%s dropped.", draft.task_id)
        return "The task being edited no longer exists."
    state.store.edit(draft.task_id, draft.text, draft.priority)
    return f"Saved: {draft.text} ({draft.priority.value})"


def cmd_cancel(state: AppState, arg: str) -> str:
    if state.draft is None:
        return "No task is being edited."
    state.draft = None
    return "Edit cancelled."


def cmd_filter(state: AppState, arg: str) -> str:
    """
    /filter       -> show current filter
    /filter SEL   -> all | active | completed | high | medium | low
    """
    if not arg:
        return f"Filter is {state.filter.value}. Options: {', '.join(s.value for s in FilterSelector)}."

    selector = FilterSelector.parse(arg)
    if selector is None:
        return f"Unknown filter: {arg}. Options: {', '.join(s.value for s in FilterSelector)}."

    state.filter = selector
    return render_list(state)


def cmd_status(state: AppState, arg: str) -> str:
    counts = count_by_selector(state.store.list())
    backend = getattr(state.settings, "storage_backend", "?")
    load_status = state.store.load_status
    editing = state.draft.task_id[:8] if state.draft else "none"
    return (
        "Status:\n"
        f"  Storage: {backend} (load: {load_status.value if load_status else 'not loaded'})\n"
        f"  Filter: {state.filter.value}\n"
        f"  Editing: {editing}\n"
        "  Counts: " + ", ".join(f"{sel.value}={n}" for sel, n in counts.items())
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks in the current filter.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add TEXT.")
registry.register("done", cmd_toggle, help_text="Toggle completion: /done N.", aliases=["toggle"])
registry.register("rm", cmd_remove, help_text="Delete a task: /rm N.", aliases=["del"])
registry.register("edit", cmd_edit, help_text="Start editing a task: /edit N.")
registry.register("text", cmd_text, help_text="Set text of the task being edited.")
registry.register(
    "priority", cmd_priority, help_text="Set priority of the task being edited.", aliases=["p"]
)
registry.register("save", cmd_save, help_text="Save the task being edited.")
registry.register("cancel", cmd_cancel, help_text="Discard the current edit.")
registry.register(
    "filter", cmd_filter, help_text="Filter: all | active | completed | high | medium | low."
)
registry.register("status", cmd_status, help_text="Show storage, filter and counts.")
