# src/horus/tasks/service.py

from __future__ import annotations

"""
Daily task service: the only surface a UI talks to.

- store calls run in worker threads (asyncio.to_thread), one SQLite connection each
- every method that acts on "the current day" takes the Session explicitly
- after each commit, subscribers of the touched scope get a fresh snapshot
- missing ids and rejected writes leave state unchanged and are only logged;
  the snapshot streams are the source of truth for the caller
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import replace

from ..core.ports import DateRepo, TaskRepo
from ..core.pubsub import SnapshotHub, Subscription
from ..core.state import Session
from ..errors import ConstraintViolation
from .rollover import run_rollover
from .task_models import DayRecord, Task, TaskStatus, display_title

logger = logging.getLogger(__name__)

ALL_DATES = "all"


class DailyTaskService:
    def __init__(
        self,
        dates: DateRepo,
        tasks: TaskRepo,
        *,
        clock: Callable[[], float] = time.time,
        today_label: str = "Today",
    ) -> None:
        self._dates = dates
        self._tasks = tasks
        self._clock = clock
        self._today_label = today_label
        self._task_hub: SnapshotHub[Task] = SnapshotHub("tasks")
        self._date_hub: SnapshotHub[DayRecord] = SnapshotHub("dates")

    # ---- lifecycle ----

    async def start(self, session: Session) -> DayRecord:
        """Run the daily rollover and point the session at today. Raises RolloverError."""
        record = await asyncio.to_thread(run_rollover, self._dates, clock=self._clock)
        self._activate(session, record)
        await self._publish_dates()
        logger.info("Session started on date id=%s (%s)", record.id, session.title)
        return record

    def close(self) -> None:
        self._task_hub.close_all()
        self._date_hub.close_all()

    def _activate(self, session: Session, record: DayRecord) -> None:
        session.active_date_id = record.id
        session.title = display_title(record, self._today_label)

    # ---- reads / subscriptions ----

    async def get_active_date(self, session: Session) -> DayRecord | None:
        if session.active_date_id is None:
            return None
        return await asyncio.to_thread(self._dates.get_by_id, session.active_date_id)

    async def subscribe_tasks(self, date_id: int, *, latest_only: bool = False) -> Subscription[Task]:
        # Register before reading so a commit landing during the read is not missed.
        sub = self._task_hub.subscribe(int(date_id), latest_only=latest_only)
        sub.seed(tuple(await asyncio.to_thread(self._tasks.tasks_for_date, date_id)))
        return sub

    async def subscribe_dates(self, *, latest_only: bool = False) -> Subscription[DayRecord]:
        sub = self._date_hub.subscribe(ALL_DATES, latest_only=latest_only)
        sub.seed(tuple(await asyncio.to_thread(self._dates.list_all)))
        return sub

    async def _publish_tasks(self, date_id: int) -> None:
        if not self._task_hub.has_subscribers(date_id):
            return
        snapshot = tuple(await asyncio.to_thread(self._tasks.tasks_for_date, date_id))
        self._task_hub.publish(date_id, snapshot)

    async def _publish_dates(self) -> None:
        if not self._date_hub.has_subscribers(ALL_DATES):
            return
        snapshot = tuple(await asyncio.to_thread(self._dates.list_all))
        self._date_hub.publish(ALL_DATES, snapshot)

    # ---- tasks ----

    async def add_task(self, session: Session, title: str) -> int | None:
        date_id = session.active_date_id
        if date_id is None:
            logger.warning("add_task ignored: session has no active date")
            return None
        if not title or not title.strip():
            logger.debug("add_task ignored: blank title")
            return None

        try:
            task_id = await asyncio.to_thread(self._tasks.insert, title, date_id)
        except ConstraintViolation as e:
            logger.warning("add_task rejected date_id=%s: %s", date_id, e)
            return None

        await self._publish_tasks(date_id)
        return task_id

    async def _set_status(self, task_id: int, status_of: Callable[[TaskStatus], TaskStatus]) -> Task | None:
        task = await asyncio.to_thread(self._tasks.get_by_id, task_id)
        if task is None:
            logger.debug("Task id=%s not found; status change skipped", task_id)
            return None

        new_status = status_of(task.status)
        if new_status is task.status:
            return task

        updated = replace(task, status=new_status, updated_at=self._clock())
        if not await asyncio.to_thread(self._tasks.update, updated):
            logger.debug("Task id=%s disappeared before update", task_id)
            return None

        logger.debug("Task %s -> %s", task_id, new_status.value)
        await self._publish_tasks(task.date_id)
        return updated

    async def toggle_task(self, task_id: int) -> Task | None:
        """Pending <-> Done. A dropped task stays dropped."""
        return await self._set_status(task_id, TaskStatus.toggled)

    async def drop_task(self, task_id: int) -> Task | None:
        return await self._set_status(task_id, lambda _: TaskStatus.DROPPED)

    async def delete_task(self, task_id: int) -> bool:
        task = await asyncio.to_thread(self._tasks.get_by_id, task_id)
        if task is None:
            logger.debug("Task id=%s not found; delete skipped", task_id)
            return False

        deleted = await asyncio.to_thread(self._tasks.delete_by_id, task_id)
        await self._publish_tasks(task.date_id)
        return deleted

    # ---- dates ----

    async def rename_active_date(self, session: Session, new_title: str) -> bool:
        if session.active_date_id is None or not new_title or not new_title.strip():
            logger.debug("rename ignored (date_id=%s)", session.active_date_id)
            return False

        record = await asyncio.to_thread(self._dates.get_by_id, session.active_date_id)
        if record is None:
            logger.debug("Date id=%s not found; rename skipped", session.active_date_id)
            return False

        renamed = replace(record, custom_title=new_title.strip())
        if not await asyncio.to_thread(self._dates.update, renamed):
            return False

        session.title = display_title(renamed, self._today_label)
        await self._publish_dates()
        return True

    async def select_date(self, session: Session, date_id: int) -> DayRecord | None:
        """Look at a history day. The today flag is untouched."""
        record = await asyncio.to_thread(self._dates.get_by_id, date_id)
        if record is None:
            logger.debug("Date id=%s not found; select skipped", date_id)
            return None
        self._activate(session, record)
        return record

    async def return_to_today(self, session: Session) -> DayRecord | None:
        record = await asyncio.to_thread(self._dates.get_today)
        if record is None:
            logger.warning("No day is flagged today; staying on date id=%s", session.active_date_id)
            return None
        self._activate(session, record)
        return record

    async def delete_date(self, date_id: int) -> bool:
        """Delete a day with everything in it: its tasks first, then the record."""
        removed = await asyncio.to_thread(self._tasks.delete_for_date, date_id)

        try:
            deleted = await asyncio.to_thread(self._dates.delete, date_id)
        except ConstraintViolation as e:
            # A task slipped in between the two deletes.
            logger.warning("delete_date id=%s rejected: %s", date_id, e)
            deleted = False

        if deleted:
            logger.info("Date id=%s deleted with %d task(s)", date_id, removed)

        await self._publish_tasks(date_id)
        await self._publish_dates()
        return deleted
