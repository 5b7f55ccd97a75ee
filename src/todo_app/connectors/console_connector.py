# src/todo_app/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_list
from ..core.state import AppState
from ..tasks.task_models import LoadStatus

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def handle_line(state: AppState, line: str) -> str:
    """One console line -> reply text. Plain text adds a task."""
    cmd_response = command_registry.handle(state, line)
    if cmd_response is not None:
        return cmd_response

    task = state.store.add(line)
    if task is None:
        return "Nothing to add: task text is empty."
    return f"Added: {task.text}"


async def run_console_loop(
    state: AppState,
    *,
    read_line: InputFn = input,
    write: OutputFn = print,
) -> None:
    """
    Interactive REPL over the task store.

    Loads the store first and closes it (draining pending writes) on exit.
    Input is read in a worker thread so queued write-backs keep running
    while the prompt waits.
    """
    app_name = str(getattr(state.settings, "app_name", "todo"))

    status = await state.store.load()
    logger.info("Console connector started (load=%s).", status.value)
    if status == LoadStatus.RECOVERED:
        write(f"[{_ts_local()}] Saved tasks could not be loaded; starting with an empty list.")

    write(f"[{_ts_local()}] [{app_name}] Type a task to add it. Use /help for commands, /exit to quit.")
    write(render_list(state))

    try:
        while True:
            prompt = "edit> " if state.draft is not None else f"{app_name}> "
            try:
                user_input = (await asyncio.to_thread(read_line, prompt)).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                write("")
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = handle_line(state, user_input)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            write(reply)
    finally:
        await state.store.close()

    logger.info("Console connector finished.")
