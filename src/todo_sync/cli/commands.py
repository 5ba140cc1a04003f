# src/todo_sync/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.errors import ValidationError
from ..core.state import AppState
from ..tasks.task_view import format_detail, format_list_line

# Handlers receive everything after "/name " untouched (spacing included).
CommandHandler = Callable[[AppState, str], Awaitable[str]]

logger = logging.getLogger(__name__)

NOT_FOUND_TASK = "Error 404: Задача не найдена"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

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

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        name, _, rest = line[1:].partition(" ")
        name = name.strip().lower()
        if not name:
            return "Empty command. Use /help to list available commands."

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, rest)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def split_head(rest: str) -> tuple[str, str]:
    """
    Split "<word> <remainder>" on the first whitespace run.
    The remainder keeps its inner and trailing spacing.
    """
    parts = rest.split(maxsplit=1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def render_list(state: AppState) -> str:
    sync = state.sync
    tasks = sync.visible()
    header = []
    if sync.view.sort_by_text:
        header.append("sorted")
    if sync.view.query:
        header.append(f"search: {sync.view.query!r}")
    title = "Tasks" + (f" ({', '.join(header)})" if header else "") + ":"
    if not tasks:
        return f"{title}\n  (no tasks)"
    return "\n".join([title, *(f"  {format_list_line(t)}" for t in tasks)])


async def cmd_help(state: AppState, rest: str) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, rest: str) -> str:
    return render_list(state)


async def cmd_show(state: AppState, rest: str) -> str:
    task_id, _ = split_head(rest)
    if not task_id:
        return "Usage: /show <id>"
    return _detail_or_not_found(state, task_id)


async def cmd_add(state: AppState, rest: str) -> str:
    """
    /add <name> <text...>
    """
    user_name, text = split_head(rest)
    try:
        await state.sync.create(user_name, text)
    except ValidationError as e:
        return e.message
    return render_list(state)


async def cmd_rename(state: AppState, rest: str) -> str:
    task_id, user_name = split_head(rest)
    if not task_id or not user_name:
        return "Usage: /rename <id> <name>"
    await state.sync.rename_owner(task_id, user_name)
    return _detail_or_not_found(state, task_id)


async def cmd_edit(state: AppState, rest: str) -> str:
    task_id, text = split_head(rest)
    if not task_id or not text:
        return "Usage: /edit <id> <text...>"
    await state.sync.edit_text(task_id, text)
    return _detail_or_not_found(state, task_id)


async def cmd_toggle(state: AppState, rest: str) -> str:
    task_id, _ = split_head(rest)
    if not task_id:
        return "Usage: /toggle <id>"
    await state.sync.toggle_completed(task_id)
    return _detail_or_not_found(state, task_id)


async def cmd_delete(state: AppState, rest: str) -> str:
    task_id, _ = split_head(rest)
    if not task_id:
        return "Usage: /delete <id>"
    await state.sync.delete(task_id)
    return render_list(state)


async def cmd_sort(state: AppState, rest: str) -> str:
    """
    /sort        -> toggle alphabetical order
    /sort on|off -> set it explicitly
    """
    arg = rest.strip().lower()
    if not arg:
        await state.sync.toggle_sorted()
    elif arg in ("on", "1", "true", "yes"):
        await state.sync.set_sorted(True)
    elif arg in ("off", "0", "false", "no"):
        await state.sync.set_sorted(False)
    else:
        return "Usage: /sort [on|off]"
    return render_list(state)


async def cmd_search(state: AppState, rest: str) -> str:
    """
    /search <query> -> show tasks containing query (matched verbatim)
    /search         -> clear the search
    """
    state.sync.search(rest)
    await state.sync.search_settled()
    return render_list(state)


async def cmd_status(state: AppState, rest: str) -> str:
    sync = state.sync
    return (
        "Status:\n"
        f"  Store: {state.backend_label}\n"
        f"  Sync: {'push' if sync.is_push else 'pull'}\n"
        f"  Tasks cached: {len(sync.collection)}\n"
        f"  Sorted: {'ON' if sync.view.sort_by_text else 'OFF'}"
    )


def _detail_or_not_found(state: AppState, task_id: str) -> str:
    task = state.sync.get(task_id)
    if task is None:
        return NOT_FOUND_TASK
    return format_detail(task)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("add", cmd_add, help_text="Create a task: /add <name> <text...>.")
registry.register("rename", cmd_rename, help_text="Change the owner: /rename <id> <name...>.")
registry.register("edit", cmd_edit, help_text="Change the text: /edit <id> <text...>.")
registry.register("toggle", cmd_toggle, help_text="Flip completion: /toggle <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("sort", cmd_sort, help_text="Alphabetical order: /sort [on|off].")
registry.register("search", cmd_search, help_text="Filter by text: /search [query].")
registry.register("status", cmd_status, help_text="Show the store and view settings.")
