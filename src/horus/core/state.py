# src/horus/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..tasks.database import TaskDatabase
    from ..tasks.date_registry import DateRegistry
    from ..tasks.service import DailyTaskService
    from ..tasks.task_store import TaskStore


@dataclass
class Session:
    """
    Which day the UI is looking at.

    Passed explicitly to every service call that acts on "the current day".
    active_date_id is a weak reference: the record may be deleted under it.
    """

    active_date_id: int | None = None
    title: str = "Today"

    @property
    def ready(self) -> bool:
        return self.active_date_id is not None


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    db: TaskDatabase
    dates: DateRegistry
    tasks: TaskStore
    service: DailyTaskService

    session: Session = field(default_factory=Session)
