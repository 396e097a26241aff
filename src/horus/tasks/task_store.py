# src/horus/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable

from ..errors import ConstraintViolation
from .database import TaskDatabase
from .task_models import Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task store. Every task belongs to exactly one day record.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db: TaskDatabase, *, clock: Callable[[], float] = time.time) -> None:
        self._db = db
        self._clock = clock
        logger.info("TaskStore ready total=%s", self.count_tasks())

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            status=TaskStatus.from_db(row["status"]),
            date_id=int(row["date_id"]),
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
        )

    # ---- queries ----

    def count_tasks(self) -> int:
        conn = self._db.connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def tasks_for_date(self, date_id: int) -> list[Task]:
        """Tasks of one day, oldest first."""
        conn = self._db.connect()
        try:
            cur = conn.execute(
                """
                SELECT *
                FROM tasks
                WHERE date_id = ?
                ORDER BY created_at ASC, id ASC
                """,
                (int(date_id),),
            )
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_by_id(self, task_id: int) -> Task | None:
        conn = self._db.connect()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    # ---- writes ----

    def insert(self, title: str, date_id: int) -> int:
        if not title or not title.strip():
            raise ConstraintViolation("title is required")

        now = self._clock()
        conn = self._db.connect()
        try:
            cur = conn.execute(
                """
                INSERT INTO tasks(title, status, date_id, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (title.strip(), TaskStatus.PENDING.value, int(date_id), now, now),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ConstraintViolation(f"date id={date_id} does not exist") from e
        finally:
            conn.close()

        rowid = cur.lastrowid
        if rowid is None:
            raise RuntimeError("SQLite did not return lastrowid for tasks insert")
        task_id = int(rowid)
        logger.debug("Task added id=%s date_id=%s", task_id, date_id)
        return task_id

    def update(self, task: Task) -> bool:
        """
        Replace the stored task with the same id.

        The caller is responsible for a fresh updated_at. Returns False if there is no such task.
        """
        conn = self._db.connect()
        try:
            cur = conn.execute(
                """
                UPDATE tasks
                SET title = ?, status = ?, date_id = ?, created_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    task.title,
                    task.status.value,
                    int(task.date_id),
                    float(task.created_at),
                    float(task.updated_at),
                    int(task.id),
                ),
            )
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ConstraintViolation(f"date id={task.date_id} does not exist") from e
        finally:
            conn.close()
        return cur.rowcount == 1

    def delete_by_id(self, task_id: int) -> bool:
        conn = self._db.connect()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def delete_for_date(self, date_id: int) -> int:
        conn = self._db.connect()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE date_id = ?", (int(date_id),))
            conn.commit()
            n = max(0, int(cur.rowcount))
            logger.debug("Tasks deleted date_id=%s count=%s", date_id, n)
            return n
        finally:
            conn.close()
