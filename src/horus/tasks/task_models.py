# src/horus/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Notes:
    - "dropped" has no way back: toggle ignores it and drop keeps it.
    """

    PENDING = "pending"
    DONE = "done"
    DROPPED = "dropped"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            return cls.PENDING

    def toggled(self) -> TaskStatus:
        if self is TaskStatus.PENDING:
            return TaskStatus.DONE
        if self is TaskStatus.DONE:
            return TaskStatus.PENDING
        return self


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    status: TaskStatus
    date_id: int
    created_at: float
    updated_at: float


@dataclass(frozen=True, slots=True)
class DayRecord:
    """One calendar day the user has touched. `date` is local midnight (epoch seconds)."""

    id: int
    date: float
    custom_title: str | None = None
    is_today: bool = False


@dataclass(frozen=True, slots=True)
class TaskView:
    """What a UI needs to render one task row."""

    id: int
    title: str
    status: TaskStatus


@dataclass(frozen=True, slots=True)
class TaskSummary:
    pending: int
    done: int
    dropped: int

    @property
    def line(self) -> str:
        if self.pending == 0 and self.done == 0:
            return "No tasks yet"
        if self.pending == 0:
            return "All done! ✨"
        tail = f", {self.done} done" if self.done > 0 else ""
        return f"{self.pending} pending{tail}"


def to_task_view(task: Task) -> TaskView:
    return TaskView(id=task.id, title=task.title, status=task.status)


def day_start(ts: float) -> float:
    """Truncate an epoch timestamp to local midnight of the same day."""
    dt = datetime.fromtimestamp(ts)
    return dt.replace(hour=0, minute=0, second=0, microsecond=0).timestamp()


def format_day(ts: float) -> str:
    """`Jan 1, 2024` style label for a day record."""
    dt = datetime.fromtimestamp(ts)
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def display_title(record: DayRecord, today_label: str = "Today") -> str:
    if record.custom_title:
        return record.custom_title
    if record.is_today:
        return today_label
    return format_day(record.date)


def summarize(tasks: Iterable[Task | TaskView]) -> TaskSummary:
    pending = done = dropped = 0
    for t in tasks:
        if t.status is TaskStatus.PENDING:
            pending += 1
        elif t.status is TaskStatus.DONE:
            done += 1
        else:
            dropped += 1
    return TaskSummary(pending=pending, done=done, dropped=dropped)


def history(dates: Sequence[DayRecord]) -> list[DayRecord]:
    """The day list as the history view shows it: everything except today."""
    return [d for d in dates if not d.is_today]
