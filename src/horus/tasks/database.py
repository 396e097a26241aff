# src/horus/tasks/database.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from ..errors import StorageUnavailable

logger = logging.getLogger(__name__)


class TaskDatabase:
    """
    The single SQLite file holding the `dates` and `tasks` tables.

    The schema is intentionally simple and migration-safe:
    - create tables if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - connect() hands out a fresh connection; callers close it after each operation
    """

    def __init__(self, db_path: str | Path = "horus.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailable(f"cannot open task database at {self._db_path}: {e}") from e
        logger.info("TaskDatabase ready db=%s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        # Tasks reference dates; a date that still owns tasks cannot be deleted.
        conn.execute("PRAGMA foreign_keys=ON")

    def _ensure_schema(self) -> None:
        conn = self.connect()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS dates (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date REAL NOT NULL,
                    custom_title TEXT,
                    is_today INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    date_id INTEGER NOT NULL REFERENCES dates(id),
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )

            def add_cols(table: str, wanted: dict[str, str]) -> None:
                cur.execute(f"PRAGMA table_info({table})")
                cols = {row["name"] for row in cur.fetchall()}
                for name, decl in wanted.items():
                    if name in cols:
                        continue
                    cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                    logger.info("TaskDatabase migration: added column %s.%s", table, name)

            # Older files may predate some of these.
            add_cols(
                "dates",
                {
                    "custom_title": "TEXT",
                    "is_today": "INTEGER NOT NULL DEFAULT 0",
                },
            )
            add_cols(
                "tasks",
                {
                    "status": "TEXT NOT NULL DEFAULT 'pending'",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                    "updated_at": "REAL NOT NULL DEFAULT 0",
                },
            )

            cur.execute("CREATE INDEX IF NOT EXISTS idx_dates_today ON dates(is_today)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_date ON tasks(date_id, created_at)")

            conn.commit()
        finally:
            conn.close()
