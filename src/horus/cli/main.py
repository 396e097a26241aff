# src/horus/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the daily rollover once, then
starts the console connector.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..errors import RolloverError, StorageUnavailable
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    await state.service.start(state.session)
    try:
        if state.settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled; rollover done, nothing else to run.")
    finally:
        state.service.close()


def main() -> int:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    try:
        state = create_initial_state(settings=settings)
        asyncio.run(_run(state))
    except StorageUnavailable as e:
        logger.error("Storage unavailable: %s", e)
        return 1
    except RolloverError as e:
        logger.error("Could not establish today's record: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted.")

    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
