# src/horus/tasks/rollover.py

from __future__ import annotations

"""
Daily rollover.

Runs once per process start, before any UI reads state:
- no day flagged today      -> insert one for the current day
- flagged day is this day   -> keep it
- flagged day is older      -> clear flags + insert a new today (one transaction)

The previous today is never deleted; it becomes ordinary history.
"""

import logging
import sqlite3
import time
from collections.abc import Callable

from ..core.ports import DateRepo
from ..errors import HorusError, RolloverError
from .task_models import DayRecord, day_start

logger = logging.getLogger(__name__)


def run_rollover(dates: DateRepo, *, clock: Callable[[], float] = time.time) -> DayRecord:
    """Return the day record that is today after reconciling with the wall clock."""
    today_start = day_start(clock())

    try:
        current = dates.get_today()

        if current is None:
            new_id = dates.insert(today_start, is_today=True)
            logger.info("Rollover: first run, created today id=%s", new_id)
        elif current.date == today_start:
            logger.debug("Rollover: today id=%s is current", current.id)
            return current
        else:
            new_id = dates.replace_today(today_start)
            logger.info(
                "Rollover: new day, archived id=%s, created today id=%s",
                current.id,
                new_id,
            )

        record = dates.get_by_id(new_id)
    except (HorusError, sqlite3.Error) as e:
        raise RolloverError(f"could not establish today: {e}") from e

    if record is None:
        raise RolloverError(f"today id={new_id} vanished right after insert")
    return record
