# tests/test_rollover.py

from __future__ import annotations

from datetime import datetime

import pytest

from horus.errors import ConstraintViolation, RolloverError
from horus.tasks.date_registry import DateRegistry
from horus.tasks.rollover import run_rollover
from horus.tasks.task_models import DayRecord
from horus.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeDateRepo

JAN1 = datetime(2024, 1, 1).timestamp()
JAN2 = datetime(2024, 1, 2).timestamp()


def _today_ids(dates: DateRegistry) -> list[int]:
    return [d.id for d in dates.list_all() if d.is_today]


def test_first_run_creates_today(dates: DateRegistry, clock: FakeClock) -> None:
    today = run_rollover(dates, clock=clock)

    assert today.is_today is True
    assert today.date == JAN1
    assert _today_ids(dates) == [today.id]


def test_rerun_on_same_day_is_idempotent(dates: DateRegistry, clock: FakeClock) -> None:
    first = run_rollover(dates, clock=clock)
    clock.set(datetime(2024, 1, 1, 23, 59))
    second = run_rollover(dates, clock=clock)

    assert second.id == first.id
    assert dates.count_dates() == 1


def test_new_day_archives_old_today(dates: DateRegistry, tasks: TaskStore, clock: FakeClock) -> None:
    old = run_rollover(dates, clock=clock)
    t1 = tasks.insert("from yesterday", old.id)

    clock.set(datetime(2024, 1, 2, 0, 0, 5))
    new = run_rollover(dates, clock=clock)

    assert new.id != old.id
    assert new.date == JAN2
    assert _today_ids(dates) == [new.id]

    old_rec = dates.get_by_id(old.id)
    assert old_rec is not None and old_rec.is_today is False
    assert [t.id for t in tasks.tasks_for_date(old.id)] == [t1]
    assert tasks.tasks_for_date(new.id) == []


def test_single_today_over_many_runs(dates: DateRegistry, clock: FakeClock) -> None:
    for day in (1, 1, 2, 5, 5, 6, 3):
        clock.set(datetime(2024, 1, day, 12, 0))
        run_rollover(dates, clock=clock)
        assert len(_today_ids(dates)) == 1


def test_rollover_with_fake_repo_uses_replace_today(clock: FakeClock) -> None:
    repo = FakeDateRepo([DayRecord(id=1, date=JAN1, custom_title="Old", is_today=True)])

    clock.set(datetime(2024, 1, 2, 8, 0))
    today = run_rollover(repo, clock=clock)

    assert repo.replace_calls == 1
    assert today.id == 2
    assert repo.records[1].is_today is False
    assert repo.records[1].custom_title == "Old"


def test_failure_is_rollover_error(clock: FakeClock) -> None:
    class BrokenRepo(FakeDateRepo):
        def insert(self, date, *, is_today=False):
            raise ConstraintViolation("disk said no")

    with pytest.raises(RolloverError):
        run_rollover(BrokenRepo(), clock=clock)
