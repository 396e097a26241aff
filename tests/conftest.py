# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from horus.cli.bootstrap import create_initial_state
from horus.core.state import AppState
from horus.tasks.database import TaskDatabase
from horus.tasks.date_registry import DateRegistry
from horus.tasks.service import DailyTaskService
from horus.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the composition root.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="horus-test",
        log_level="DEBUG",
        console_enabled=False,
        today_label="Today",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "horus.sqlite3",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 9, 0))


@pytest.fixture()
def db(tmp_path: Path) -> TaskDatabase:
    return TaskDatabase(tmp_path / "horus.sqlite3")


@pytest.fixture()
def dates(db: TaskDatabase) -> DateRegistry:
    return DateRegistry(db)


@pytest.fixture()
def tasks(db: TaskDatabase, clock: FakeClock) -> TaskStore:
    return TaskStore(db, clock=clock)


@pytest.fixture()
def service(dates: DateRegistry, tasks: TaskStore, clock: FakeClock) -> DailyTaskService:
    return DailyTaskService(dates, tasks, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState built by the real composition root.

    NOTE: We keep the real SQLite stores here because their correctness is
    part of what we want to test.
    """
    return create_initial_state(settings=settings, clock=clock)
