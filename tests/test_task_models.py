# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime

import pytest

from horus.tasks.task_models import (
    DayRecord,
    Task,
    TaskStatus,
    day_start,
    display_title,
    format_day,
    history,
    summarize,
    to_task_view,
)


def _task(task_id: int, status: TaskStatus) -> Task:
    return Task(id=task_id, title=f"t{task_id}", status=status, date_id=1, created_at=0.0, updated_at=0.0)


@pytest.mark.parametrize("status", [TaskStatus.PENDING, TaskStatus.DONE])
def test_toggle_twice_restores_status(status: TaskStatus) -> None:
    assert status.toggled() is not status
    assert status.toggled().toggled() is status


def test_toggle_keeps_dropped() -> None:
    assert TaskStatus.DROPPED.toggled() is TaskStatus.DROPPED


def test_status_from_db_falls_back_to_pending() -> None:
    assert TaskStatus.from_db("done") is TaskStatus.DONE
    assert TaskStatus.from_db(None) is TaskStatus.PENDING
    assert TaskStatus.from_db("in_progress") is TaskStatus.PENDING


def test_day_start_truncates_to_local_midnight() -> None:
    afternoon = datetime(2024, 3, 5, 17, 45, 12).timestamp()
    assert day_start(afternoon) == datetime(2024, 3, 5).timestamp()
    assert day_start(day_start(afternoon)) == day_start(afternoon)


def test_display_title() -> None:
    jan1 = datetime(2024, 1, 1).timestamp()
    assert display_title(DayRecord(id=1, date=jan1, is_today=True)) == "Today"
    assert display_title(DayRecord(id=1, date=jan1, is_today=True), "Now") == "Now"
    assert display_title(DayRecord(id=1, date=jan1)) == format_day(jan1) == "Jan 1, 2024"
    assert display_title(DayRecord(id=1, date=jan1, custom_title="Moving day", is_today=True)) == "Moving day"


def test_summary_lines() -> None:
    assert summarize([]).line == "No tasks yet"
    assert summarize([_task(1, TaskStatus.DROPPED)]).line == "No tasks yet"
    assert summarize([_task(1, TaskStatus.DONE)]).line == "All done! ✨"
    assert summarize([_task(1, TaskStatus.PENDING), _task(2, TaskStatus.PENDING)]).line == "2 pending"

    mixed = summarize(
        [_task(1, TaskStatus.PENDING), _task(2, TaskStatus.DONE), _task(3, TaskStatus.DROPPED)]
    )
    assert mixed.line == "1 pending, 1 done"
    assert mixed.dropped == 1


def test_task_view_projection() -> None:
    view = to_task_view(_task(7, TaskStatus.DONE))
    assert (view.id, view.title, view.status) == (7, "t7", TaskStatus.DONE)


def test_history_hides_today() -> None:
    days = [DayRecord(id=2, date=2.0, is_today=True), DayRecord(id=1, date=1.0)]
    assert [d.id for d in history(days)] == [1]
