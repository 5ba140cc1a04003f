# src/todo_sync/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts task synchronization and runs the
console REPL until /exit, EOF or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await state.sync.start()
        await run_console_loop(state)
    finally:
        await shutdown_state(state)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        console_level=level_from_name(getattr(settings, "log_level", "INFO")),
        log_dir=getattr(settings, "data_dir", ".local/todo"),
        log_file_name=getattr(settings, "log_file", "todo.log"),
    )

    logger.info("Starting %s... (log file: %s)", getattr(settings, "app_name", "todo-sync"), log_file or "off")

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
