"""SQLite store for reading schedules."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from .constants import TOTAL_CHAPTERS
from .errors import PersistenceError
from .schedule import (
    STATUS_ACTIVE,
    STATUS_PAUSED,
    ReadingSchedule,
    new_schedule,
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS reading_schedule (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    style_type TEXT NOT NULL,
    style_config TEXT NOT NULL,
    start_date TEXT NOT NULL,
    status TEXT NOT NULL,
    total_chapters_in_bible INTEGER NOT NULL,
    completed_chapters TEXT NOT NULL DEFAULT '[]',
    chapters_read_count INTEGER NOT NULL DEFAULT 0,
    progress_percent REAL NOT NULL DEFAULT 0,
    last_read_reference TEXT,
    read_completion_timestamps TEXT NOT NULL DEFAULT '[]',
    revision INTEGER NOT NULL DEFAULT 0
)
"""

UPDATABLE_FIELDS = (
    "status",
    "completed_chapters",
    "chapters_read_count",
    "progress_percent",
    "last_read_reference",
    "read_completion_timestamps",
)


def _encode(field: str, value: Any) -> Any:
    if field == "completed_chapters":
        return json.dumps(sorted(value))
    if field == "read_completion_timestamps":
        return json.dumps([stamp.isoformat() for stamp in value])
    return value


class ScheduleStore:
    """Reading schedules for any number of users, one row per schedule.

    Every write runs in its own transaction and bumps the row's revision,
    so readers can tell when a snapshot they hold has gone stale.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = db_path
        try:
            self.connection = sqlite3.connect(str(db_path))
            self.connection.row_factory = sqlite3.Row
            with self.connection:
                self.connection.execute(SCHEMA)
        except sqlite3.Error as exc:
            raise PersistenceError(f"cannot open schedule store at {db_path}: {exc}") from exc

    def _row_to_schedule(self, row: sqlite3.Row) -> ReadingSchedule:
        return ReadingSchedule.from_dict(
            {
                "id": row["id"],
                "user_id": row["user_id"],
                "style_type": row["style_type"],
                "style_config": json.loads(row["style_config"]),
                "start_date": row["start_date"],
                "status": row["status"],
                "total_chapters_in_bible": row["total_chapters_in_bible"],
                "completed_chapters": json.loads(row["completed_chapters"]),
                "chapters_read_count": row["chapters_read_count"],
                "progress_percent": row["progress_percent"],
                "last_read_reference": row["last_read_reference"],
                "read_completion_timestamps": json.loads(row["read_completion_timestamps"]),
                "revision": row["revision"],
            }
        )

    def get_active_or_paused_schedule(self, user_id: str) -> ReadingSchedule | None:
        try:
            row = self.connection.execute(
                "SELECT * FROM reading_schedule WHERE user_id=? AND status IN (?, ?) "
                "ORDER BY id LIMIT 1",
                (user_id, STATUS_ACTIVE, STATUS_PAUSED),
            ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"cannot load schedule for {user_id}: {exc}") from exc
        return self._row_to_schedule(row) if row else None

    def create_schedule(
        self,
        user_id: str,
        style_type: str,
        style_config: dict[str, Any],
        start_date: datetime | None = None,
        total_chapters: int = TOTAL_CHAPTERS,
    ) -> int:
        schedule = new_schedule(user_id, style_type, style_config, start_date, total_chapters)
        try:
            with self.connection:
                cursor = self.connection.execute(
                    "INSERT INTO reading_schedule (user_id, style_type, style_config, "
                    "start_date, status, total_chapters_in_bible) VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        schedule.user_id,
                        schedule.style_type,
                        json.dumps(schedule.style_config),
                        schedule.start_date.isoformat(),
                        schedule.status,
                        schedule.total_chapters_in_bible,
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"cannot create schedule for {user_id}: {exc}") from exc
        return int(cursor.lastrowid)

    def apply_atomic_update(self, schedule_id: int, fields: dict[str, Any]) -> int:
        """Write ``fields`` in one transaction and return the new revision."""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise PersistenceError(f"fields cannot be updated: {sorted(unknown)}")
        names = [name for name in UPDATABLE_FIELDS if name in fields]
        columns = [f"{name}=?" for name in names] + ["revision=revision+1"]
        values = [_encode(name, fields[name]) for name in names]
        try:
            with self.connection:
                cursor = self.connection.execute(
                    f"UPDATE reading_schedule SET {', '.join(columns)} WHERE id=?",
                    (*values, schedule_id),
                )
                if cursor.rowcount == 0:
                    raise PersistenceError(f"schedule {schedule_id} does not exist")
                row = self.connection.execute(
                    "SELECT revision FROM reading_schedule WHERE id=?", (schedule_id,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"cannot update schedule {schedule_id}: {exc}") from exc
        return int(row["revision"])

    def pause(self, schedule_id: int) -> int:
        return self.apply_atomic_update(schedule_id, {"status": STATUS_PAUSED})

    def resume(self, schedule_id: int) -> int:
        return self.apply_atomic_update(schedule_id, {"status": STATUS_ACTIVE})

    def delete_schedule(self, schedule_id: int) -> None:
        try:
            with self.connection:
                cursor = self.connection.execute(
                    "DELETE FROM reading_schedule WHERE id=?", (schedule_id,)
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"cannot delete schedule {schedule_id}: {exc}") from exc
        if cursor.rowcount == 0:
            raise PersistenceError(f"schedule {schedule_id} does not exist")

    def close(self) -> None:
        self.connection.close()
