# src/horus/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The rollover and the service depend on Protocols instead of the SQLite classes.
This keeps storage swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import DayRecord, Task


class DateRepo(Protocol):
    def list_all(self) -> list[DayRecord]: ...
    def get_today(self) -> DayRecord | None: ...
    def get_by_id(self, date_id: int) -> DayRecord | None: ...
    def insert(self, date: float | None, *, is_today: bool = False) -> int: ...
    def update(self, record: DayRecord) -> bool: ...
    def clear_all_today_flags(self) -> None: ...
    def replace_today(self, date: float) -> int: ...
    def delete(self, date_id: int) -> bool: ...


class TaskRepo(Protocol):
    def tasks_for_date(self, date_id: int) -> list[Task]: ...
    def get_by_id(self, task_id: int) -> Task | None: ...
    def insert(self, title: str, date_id: int) -> int: ...
    def update(self, task: Task) -> bool: ...
    def delete_by_id(self, task_id: int) -> bool: ...
    def delete_for_date(self, date_id: int) -> int: ...
