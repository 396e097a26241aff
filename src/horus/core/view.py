# src/horus/core/view.py

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..tasks.task_models import DayRecord, Task, TaskView, to_task_view
from .pubsub import Subscription
from .state import Session

if TYPE_CHECKING:
    from ..tasks.service import DailyTaskService

logger = logging.getLogger(__name__)


class DayView:
    """
    UI-side holder of the two live subscriptions: tasks of the active day and
    the day list. follow() re-targets the task subscription whenever the
    session switches days; rendering reads the latest snapshots.
    """

    def __init__(self, service: DailyTaskService) -> None:
        self._service = service
        self._tasks_sub: Subscription[Task] | None = None
        self._dates_sub: Subscription[DayRecord] | None = None

    async def follow(self, session: Session) -> None:
        if self._dates_sub is None:
            self._dates_sub = await self._service.subscribe_dates(latest_only=True)

        date_id = session.active_date_id
        if self._tasks_sub is not None and self._tasks_sub.key == date_id:
            return

        if self._tasks_sub is not None:
            self._tasks_sub.close()
            self._tasks_sub = None

        if date_id is not None:
            self._tasks_sub = await self._service.subscribe_tasks(date_id, latest_only=True)
            logger.debug("DayView following date id=%s", date_id)

    @property
    def tasks(self) -> list[TaskView]:
        if self._tasks_sub is None:
            return []
        return [to_task_view(t) for t in self._tasks_sub.latest]

    @property
    def dates(self) -> tuple[DayRecord, ...]:
        if self._dates_sub is None:
            return ()
        return self._dates_sub.latest

    def close(self) -> None:
        for sub in (self._tasks_sub, self._dates_sub):
            if sub is not None:
                sub.close()
        self._tasks_sub = None
        self._dates_sub = None
