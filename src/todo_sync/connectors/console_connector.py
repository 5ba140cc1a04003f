# src/todo_sync/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_list
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class LiveListRenderer:
    """
    Collection listener for push stores: re-prints the list when a snapshot
    arrives between commands. Silent while a command runs, since the command
    prints its own reply.
    """

    def __init__(self, state: AppState, emit: Callable[[str], None] = _print_ts) -> None:
        self._state = state
        self._emit = emit
        self.busy = False

    def __call__(self) -> None:
        if self.busy:
            return
        self._emit(render_list(self._state))


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (store=%s).", state.backend_label)
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")
    print(render_list(state))

    live: LiveListRenderer | None = None
    if state.sync.is_push:
        live = LiveListRenderer(state)
        state.sync.add_listener(live)

    while True:
        try:
            # input() blocks; keep the event loop free for the realtime stream.
            raw = await asyncio.to_thread(input, ">>> ")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not raw.strip():
            continue

        command = raw.lstrip()
        if command.rstrip().lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not command.startswith("/"):
            # Plain text is a search query, like typing into the search box.
            command = f"/search {raw}"

        if live is not None:
            live.busy = True
        try:
            response = await command_registry.handle(state, command)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."
        finally:
            if live is not None:
                live.busy = False

        if response is not None:
            _print_ts(response)
