# src/horus/tasks/date_registry.py

from __future__ import annotations

import logging
import sqlite3

from ..errors import ConstraintViolation
from .database import TaskDatabase
from .task_models import DayRecord

logger = logging.getLogger(__name__)


class DateRegistry:
    """
    Day records and the "today" flag.

    The registry never decides which record is today on its own: callers
    (the rollover) keep at most one flagged record. replace_today() is the
    one place where clearing and inserting happen together.
    """

    def __init__(self, db: TaskDatabase) -> None:
        self._db = db
        logger.info("DateRegistry ready total=%s", self.count_dates())

    @staticmethod
    def _row_to_date(row: sqlite3.Row) -> DayRecord:
        return DayRecord(
            id=int(row["id"]),
            date=float(row["date"]),
            custom_title=row["custom_title"],
            is_today=bool(row["is_today"]),
        )

    # ---- queries ----

    def count_dates(self) -> int:
        conn = self._db.connect()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM dates").fetchone()
            return int(n)
        finally:
            conn.close()

    def list_all(self) -> list[DayRecord]:
        """All day records, newest day first."""
        conn = self._db.connect()
        try:
            cur = conn.execute("SELECT * FROM dates ORDER BY date DESC, id DESC")
            return [self._row_to_date(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def get_today(self) -> DayRecord | None:
        conn = self._db.connect()
        try:
            row = conn.execute(
                "SELECT * FROM dates WHERE is_today = 1 ORDER BY date DESC, id DESC LIMIT 1"
            ).fetchone()
            return self._row_to_date(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, date_id: int) -> DayRecord | None:
        conn = self._db.connect()
        try:
            row = conn.execute("SELECT * FROM dates WHERE id = ?", (int(date_id),)).fetchone()
            return self._row_to_date(row) if row else None
        finally:
            conn.close()

    # ---- writes ----

    def insert(self, date: float | None, *, is_today: bool = False) -> int:
        if date is None:
            raise ConstraintViolation("date is required")

        conn = self._db.connect()
        try:
            cur = conn.execute(
                "INSERT INTO dates(date, custom_title, is_today) VALUES (?, NULL, ?)",
                (float(date), 1 if is_today else 0),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for dates insert")
            date_id = int(rowid)
            logger.debug("Date added id=%s date=%s today=%s", date_id, date, is_today)
            return date_id
        finally:
            conn.close()

    def update(self, record: DayRecord) -> bool:
        """Replace the stored record with the same id. Returns False if there is none."""
        conn = self._db.connect()
        try:
            cur = conn.execute(
                "UPDATE dates SET date = ?, custom_title = ?, is_today = ? WHERE id = ?",
                (
                    float(record.date),
                    record.custom_title,
                    1 if record.is_today else 0,
                    int(record.id),
                ),
            )
            conn.commit()
            return cur.rowcount == 1
        finally:
            conn.close()

    def clear_all_today_flags(self) -> None:
        conn = self._db.connect()
        try:
            conn.execute("UPDATE dates SET is_today = 0 WHERE is_today != 0")
            conn.commit()
        finally:
            conn.close()

    def replace_today(self, date: float) -> int:
        """
        Atomically:
          every is_today -> 0
          insert (date, is_today=1)

        Readers on other connections see either the old today or the new one.
        """
        conn = self._db.connect()
        try:
            cur = conn.cursor()
            cur.execute("UPDATE dates SET is_today = 0 WHERE is_today != 0")
            cur.execute(
                "INSERT INTO dates(date, custom_title, is_today) VALUES (?, NULL, 1)",
                (float(date),),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for dates insert")
            conn.commit()
            logger.info("Today replaced: id=%s date=%s", rowid, date)
            return int(rowid)
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def delete(self, date_id: int) -> bool:
        """
        Remove one day record. Its tasks must already be gone.

        Returns False if the id did not exist.
        """
        conn = self._db.connect()
        try:
            cur = conn.execute("DELETE FROM dates WHERE id = ?", (int(date_id),))
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ConstraintViolation(f"date id={date_id} still owns tasks") from e
        finally:
            conn.close()
        return cur.rowcount == 1
