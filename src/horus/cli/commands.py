# src/horus/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..core.view import DayView
from ..tasks.task_models import TaskStatus, display_title, format_day, history, summarize

CommandHandler = Callable[[AppState, DayView, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

_STATUS_MARK = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.DONE: "[x]",
    TaskStatus.DROPPED: "[-]",
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

    async def handle(self, state: AppState, view: DayView, line: str) -> str | None:
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

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, view, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any other text adds a task to the current day.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def render_day(state: AppState, view: DayView) -> str:
    tasks = view.tasks
    lines = [state.session.title, summarize(tasks).line]
    for t in tasks:
        lines.append(f"  {t.id:>4} {_STATUS_MARK[t.status]} {t.title}")
    return "\n".join(lines)


def render_history(view: DayView) -> str:
    days = history(view.dates)
    if not days:
        return "History is empty."
    lines = ["History:"]
    for d in days:
        label = display_title(d)
        suffix = f" ({format_day(d.date)})" if d.custom_title else ""
        lines.append(f"  {d.id:>4} {label}{suffix}")
    return "\n".join(lines)


async def _day_reply(state: AppState, view: DayView) -> str:
    await view.follow(state.session)
    return render_day(state, view)


def _parse_id(args: list[str]) -> int | None:
    if len(args) != 1:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


# ---- handlers ----


async def cmd_help(state: AppState, view: DayView, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, view: DayView, args: list[str]) -> str:
    s = summarize(view.tasks)
    return (
        "Status:\n"
        f"  Database: {state.db.path}\n"
        f"  Active date id: {state.session.active_date_id}\n"
        f"  Days stored: {len(view.dates)}\n"
        f"  Tasks: {s.pending} pending, {s.done} done, {s.dropped} dropped"
    )


async def cmd_list(state: AppState, view: DayView, args: list[str]) -> str:
    return await _day_reply(state, view)


async def cmd_add(state: AppState, view: DayView, args: list[str]) -> str:
    title = " ".join(args)
    if not title:
        return "Usage: /add <title>"
    await state.service.add_task(state.session, title)
    return await _day_reply(state, view)


def _task_command(action: str) -> CommandHandler:
    async def handler(state: AppState, view: DayView, args: list[str]) -> str:
        task_id = _parse_id(args)
        if task_id is None:
            return f"Usage: /{action} <task id>"

        svc = state.service
        if action == "toggle":
            result = await svc.toggle_task(task_id)
        elif action == "drop":
            result = await svc.drop_task(task_id)
        else:
            result = await svc.delete_task(task_id)

        if not result:
            return f"No task with id {task_id}."
        return await _day_reply(state, view)

    return handler


async def cmd_rename(state: AppState, view: DayView, args: list[str]) -> str:
    title = " ".join(args)
    if not title:
        return "Usage: /rename <title>"
    if not await state.service.rename_active_date(state.session, title):
        return "Could not rename the current day."
    return await _day_reply(state, view)


async def cmd_history(state: AppState, view: DayView, args: list[str]) -> str:
    await view.follow(state.session)
    return render_history(view)


async def cmd_open(state: AppState, view: DayView, args: list[str]) -> str:
    date_id = _parse_id(args)
    if date_id is None:
        return "Usage: /open <day id>  (see /history)"
    if await state.service.select_date(state.session, date_id) is None:
        return f"No day with id {date_id}."
    return await _day_reply(state, view)


async def cmd_today(state: AppState, view: DayView, args: list[str]) -> str:
    if await state.service.return_to_today(state.session) is None:
        return "No day is marked as today. Restart to run the daily rollover."
    return await _day_reply(state, view)


async def cmd_forget(state: AppState, view: DayView, args: list[str]) -> str:
    date_id = _parse_id(args)
    if date_id is None:
        return "Usage: /forget <day id>  (see /history)"

    await view.follow(state.session)
    record = next((d for d in view.dates if d.id == date_id), None)
    if record is None:
        return f"No day with id {date_id}."
    if record.is_today:
        return "Today cannot be deleted from history."

    if not await state.service.delete_date(date_id):
        return f"Day {date_id} was not deleted."

    if state.session.active_date_id == date_id:
        await state.service.return_to_today(state.session)
        await view.follow(state.session)

    return f"Deleted day {date_id}.\n" + render_history(view)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["?"])
registry.register("status", cmd_status, help_text="Show database and counters.")
registry.register("list", cmd_list, help_text="Show tasks of the current day.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <title>.")
registry.register(
    "toggle", _task_command("toggle"), help_text="Pending <-> done: /toggle <id>.", aliases=["t"]
)
registry.register("drop", _task_command("drop"), help_text="Drop a task for good: /drop <id>.")
registry.register(
    "delete", _task_command("delete"), help_text="Delete a task: /delete <id>.", aliases=["rm"]
)
registry.register("rename", cmd_rename, help_text="Rename the current day: /rename <title>.")
registry.register("history", cmd_history, help_text="List past days.", aliases=["h"])
registry.register("open", cmd_open, help_text="Look at a past day: /open <day id>.")
registry.register("today", cmd_today, help_text="Go back to today.")
registry.register("forget", cmd_forget, help_text="Delete a past day and its tasks: /forget <id>.")
