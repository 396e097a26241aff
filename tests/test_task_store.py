# tests/test_task_store.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from horus.errors import ConstraintViolation
from horus.tasks.date_registry import DateRegistry
from horus.tasks.task_models import TaskStatus
from horus.tasks.task_store import TaskStore

from .fakes import FakeClock

JAN1 = datetime(2024, 1, 1).timestamp()
JAN2 = datetime(2024, 1, 2).timestamp()


def test_insert_defaults(dates: DateRegistry, tasks: TaskStore, clock: FakeClock) -> None:
    d1 = dates.insert(JAN1, is_today=True)
    before = clock.now

    task_id = tasks.insert("  Buy milk  ", d1)
    task = tasks.get_by_id(task_id)

    assert task is not None
    assert task.title == "Buy milk"
    assert task.status is TaskStatus.PENDING
    assert task.date_id == d1
    assert task.created_at == task.updated_at == before


def test_insert_rejects_blank_title_and_unknown_date(dates: DateRegistry, tasks: TaskStore) -> None:
    d1 = dates.insert(JAN1)

    with pytest.raises(ConstraintViolation):
        tasks.insert("   ", d1)
    with pytest.raises(ConstraintViolation):
        tasks.insert("Orphan", 4242)
    assert tasks.count_tasks() == 0


def test_tasks_for_date_is_scoped_and_oldest_first(dates: DateRegistry, tasks: TaskStore) -> None:
    d1 = dates.insert(JAN1)
    d2 = dates.insert(JAN2)

    a = tasks.insert("a", d1)
    other = tasks.insert("other day", d2)
    b = tasks.insert("b", d1)
    c = tasks.insert("c", d1)

    listed = tasks.tasks_for_date(d1)
    assert [t.id for t in listed] == [a, b, c]
    assert [t.created_at for t in listed] == sorted(t.created_at for t in listed)
    assert [t.id for t in tasks.tasks_for_date(d2)] == [other]
    assert tasks.tasks_for_date(999) == []


def test_update_replaces_status_and_timestamp(dates: DateRegistry, tasks: TaskStore) -> None:
    d1 = dates.insert(JAN1)
    task_id = tasks.insert("write report", d1)
    task = tasks.get_by_id(task_id)
    assert task is not None

    assert tasks.update(replace(task, status=TaskStatus.DONE, updated_at=task.updated_at + 60)) is True
    again = tasks.get_by_id(task_id)
    assert again is not None
    assert again.status is TaskStatus.DONE
    assert again.updated_at == task.updated_at + 60
    assert again.created_at == task.created_at

    assert tasks.update(replace(task, id=999)) is False


def test_delete_by_id_and_for_date(dates: DateRegistry, tasks: TaskStore) -> None:
    d1 = dates.insert(JAN1)
    d2 = dates.insert(JAN2)
    keep = tasks.insert("keep", d2)
    t1 = tasks.insert("one", d1)
    tasks.insert("two", d1)

    assert tasks.delete_by_id(t1) is True
    assert tasks.delete_by_id(t1) is False

    assert tasks.delete_for_date(d1) == 1
    assert tasks.tasks_for_date(d1) == []
    assert [t.id for t in tasks.tasks_for_date(d2)] == [keep]
