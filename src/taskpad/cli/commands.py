# src/taskpad/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..auth.session import AuthResult
from ..core.state import AppState
from ..storage.errors import StorageWriteError
from ..tasks.task_models import Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

NOT_SAVED = "Change not saved: storage is unavailable."
DELETE_TITLE = "Delete Task"
DELETE_PROMPT = "Are you sure you want to delete this task?"

# Commands allowed without a stored credential when login is required.
_OPEN_COMMANDS = {"help", "h", "?", "login", "status"}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        """
        raw_args=True hands the handler the untouched text after the command
        name as a single argument (empty list if there is none).
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        names = [key, *(a.lower() for a in aliases)]
        for n in names:
            self._handlers[n] = handler
        if raw_args:
            self._raw.update(names)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        if name in self._raw:
            body = line[1:].lstrip()
            rest = body[len(parts[0]) :]
            # Drop the single separator after the command name.
            rest = rest[1:] if rest[:1].isspace() else rest
            args = [rest] if rest else []

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if (
            getattr(state.settings, "require_login", False)
            and name not in _OPEN_COMMANDS
            and not state.session.is_authenticated
        ):
            return "Please /login first."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task_list(tasks: tuple[Task, ...]) -> str:
    if not tasks:
        return "No tasks found. Add a new one!"
    lines = [f"Showing {len(tasks)} tasks"]
    for i, t in enumerate(tasks, start=1):
        mark = "x" if t.is_completed else " "
        lines.append(f"{i}. [{mark}] {t.text}")
    return "\n".join(lines)


def _resolve(state: AppState, ref: str) -> Task | None:
    """Map a 1-based position in the currently shown list to a task."""
    try:
        pos = int(ref)
    except ValueError:
        return None
    shown = state.visible_tasks()
    if pos < 1 or pos > len(shown):
        return None
    return shown[pos - 1]


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.task_store
    signed_in = "yes" if state.session.is_authenticated else "no"
    search = state.search_text or "(none)"
    return (
        "Status:\n"
        f"  Tasks: {len(store)} ({store.count_completed()} completed)\n"
        f"  Search: {search}\n"
        f"  Signed in: {signed_in}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_task_list(state.visible_tasks())


def cmd_add(state: AppState, args: list[str]) -> str:
    text = " ".join(args)
    try:
        task = state.task_store.add(text)
    except StorageWriteError:
        logger.exception("Failed to save new task.")
        return NOT_SAVED
    if task is None:
        return "Usage: /add <text> (task text cannot be empty)."
    state.visible_tasks()
    return "Task added"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <n> <new text>."
    task = _resolve(state, args[0])
    if task is None:
        return f"No task #{args[0]} in the current list."
    try:
        ok = state.task_store.update(task.id, " ".join(args[1:]))
    except StorageWriteError:
        logger.exception("Failed to save edited task id=%s.", task.id)
        return NOT_SAVED
    if not ok:
        return "Task text cannot be empty."
    state.visible_tasks()
    return "Task updated"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n>."
    task = _resolve(state, args[0])
    if task is None:
        return f"No task #{args[0]} in the current list."
    try:
        updated = state.task_store.toggle_complete(task.id)
    except StorageWriteError:
        logger.exception("Failed to save toggled task id=%s.", task.id)
        return NOT_SAVED
    if updated is None:
        return f"No task #{args[0]} in the current list."
    state.visible_tasks()
    return "Task completed" if updated.is_completed else "Task unchecked"


def cmd_delete(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /del <n>  -> ask for confirmation, then delete
    """
    if not args:
        return "Usage: /del <n>."
    task = _resolve(state, args[0])
    if task is None:
        return f"No task #{args[0]} in the current list."

    if getattr(state.settings, "confirm_delete", True):
        if emit:
            with contextlib.suppress(Exception):
                emit(f"Deleting: {task.text}")
        if not state.confirm.confirm(DELETE_TITLE, DELETE_PROMPT):
            return "Cancelled."

    try:
        removed = state.task_store.remove(task.id)
    except StorageWriteError:
        logger.exception("Failed to save after deleting task id=%s.", task.id)
        return NOT_SAVED
    if not removed:
        return f"No task #{args[0]} in the current list."
    state.visible_tasks()
    return "Task deleted"


def cmd_search(state: AppState, args: list[str]) -> str:
    """
    /search        -> clear the search
    /search <text> -> show only tasks containing <text> (case-insensitive)
    """
    state.search_text = args[0] if args else ""
    return format_task_list(state.visible_tasks())


def cmd_login(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /login <access token>."
    try:
        ok = state.session.handle_auth_result(AuthResult(type="success", access_token=args[0]))
    except StorageWriteError:
        logger.exception("Failed to store credential.")
        return NOT_SAVED
    return "Signed in." if ok else "Sign-in failed."


def cmd_logout(state: AppState, args: list[str]) -> str:
    try:
        state.session.sign_out()
    except StorageWriteError:
        logger.exception("Failed to remove credential.")
        return NOT_SAVED
    return "Signed out."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task totals, search and sign-in state.")
registry.register("list", cmd_list, help_text="List tasks (respects current search).", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> <new text>.")
registry.register(
    "done", cmd_done, help_text="Mark a task done / not done: /done <n>.", aliases=["toggle"]
)
registry.register(
    "del", cmd_delete, help_text="Delete a task (asks first): /del <n>.", aliases=["delete", "rm"]
)
registry.register(
    "search",
    cmd_search,
    help_text="Filter tasks: /search <text> | /search to clear.",
    raw_args=True,
)
registry.register("login", cmd_login, help_text="Store an access token: /login <token>.")
registry.register("logout", cmd_logout, help_text="Forget the stored access token.")
