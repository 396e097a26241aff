# src/horus/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- opens the database and wires the stores and the service into AppState.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import get_settings
from ..core.state import AppState, Session
from ..tasks.database import TaskDatabase
from ..tasks.date_registry import DateRegistry
from ..tasks.service import DailyTaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, clock: Callable[[], float] = time.time) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the clock) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    Raises StorageUnavailable if the database cannot be opened.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    db = TaskDatabase(settings.db_path)
    dates = DateRegistry(db)
    tasks = TaskStore(db, clock=clock)
    service = DailyTaskService(
        dates,
        tasks,
        clock=clock,
        today_label=getattr(settings, "today_label", "Today"),
    )

    return AppState(
        settings=settings,
        db=db,
        dates=dates,
        tasks=tasks,
        service=service,
        session=Session(title=getattr(settings, "today_label", "Today")),
    )
