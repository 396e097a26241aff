# src/horus/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading

from ..cli.commands import registry as command_registry
from ..cli.commands import render_day
from ..core.state import AppState
from ..core.view import DayView

logger = logging.getLogger(__name__)


def _resolve(fut: asyncio.Future[str], line: str | None, exc: BaseException | None) -> None:
    if fut.done():
        return
    if exc is not None:
        fut.set_exception(exc)
    else:
        fut.set_result(line or "")


async def _read_line(prompt: str) -> str:
    """
    input() on a daemon thread.

    A pending read must not keep the process alive after the loop exits,
    so the default executor (joined at shutdown) is not used here.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _worker() -> None:
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt) as e:
            loop.call_soon_threadsafe(_resolve, fut, None, e)
        else:
            loop.call_soon_threadsafe(_resolve, fut, line, None)

    threading.Thread(target=_worker, name="console-input", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (date_id=%s).", state.session.active_date_id)

    view = DayView(state.service)
    await view.follow(state.session)

    print(render_day(state, view))
    print("\nType a task to add it. Use /help for commands. Use /exit to quit.\n")

    try:
        while True:
            try:
                user_input = (await _read_line("> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                reply = await command_registry.handle(state, view, user_input)
                if reply is None:
                    # Plain text is the quick-add input.
                    await state.service.add_task(state.session, user_input)
                    await view.follow(state.session)
                    reply = render_day(state, view)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            print(reply)
            print()
    finally:
        view.close()
        logger.info("Console connector finished.")
