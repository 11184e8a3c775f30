"""SQLite-backed store.

Tables mirror the hosted schema the roster was first written against:
``staff`` (the directory) and ``duty_roster`` (assignments). There is no
uniqueness constraint on (school, staff, duty type, date), so two
overlapping generation runs can double-book a staff member.
"""

import logging
import sqlite3
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Union

from dutyroster.domain.models import (
    DutyAssignment,
    DutyHistoryEntry,
    RosterEntry,
    StaffMember,
)
from dutyroster.errors import StorageError
from dutyroster.storage.base import RosterStore

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS staff (
    id TEXT NOT NULL,
    school_id TEXT NOT NULL,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    position TEXT NOT NULL DEFAULT '',
    active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (school_id, id)
);

CREATE TABLE IF NOT EXISTS duty_roster (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    school_id TEXT NOT NULL,
    staff_id TEXT NOT NULL,
    duty_type TEXT NOT NULL,
    duty_date TEXT NOT NULL,
    start_time TEXT NOT NULL,
    end_time TEXT NOT NULL,
    location TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_duty_roster_school_date
    ON duty_roster (school_id, duty_date);
"""


class SQLiteRosterStore(RosterStore):
    """RosterStore over a single SQLite database file.

    Example:
        >>> store = SQLiteRosterStore("dutyroster.db")
        >>> store.init_db()
        >>> store.fetch_active_staff("school-1")
        []
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        try:
            self.conn.executescript(_SCHEMA_SQL)
            self.conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize database: {e}") from e

    def close(self) -> None:
        self.conn.close()

    def add_staff(self, school_id: str, staff: StaffMember) -> StaffMember:
        try:
            with self.conn:
                self.conn.execute(
                    """
                    INSERT INTO staff (id, school_id, first_name, last_name, position, active)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        staff.id,
                        school_id,
                        staff.first_name,
                        staff.last_name,
                        staff.position,
                        int(staff.active),
                    ),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Could not add staff {staff.id}: {e}") from e
        return staff

    def fetch_active_staff(self, school_id: str) -> list[StaffMember]:
        # rowid keeps registration order, which the generator uses for tie-breaks
        rows = self._query(
            """
            SELECT id, first_name, last_name, position, active
            FROM staff
            WHERE school_id = ? AND active = 1
            ORDER BY rowid
            """,
            (school_id,),
        )
        return [
            StaffMember(
                id=row["id"],
                first_name=row["first_name"],
                last_name=row["last_name"],
                position=row["position"],
                active=bool(row["active"]),
            )
            for row in rows
        ]

    def fetch_recent_assignments(
        self,
        school_id: str,
        since: date,
    ) -> list[DutyHistoryEntry]:
        rows = self._query(
            """
            SELECT staff_id, duty_type
            FROM duty_roster
            WHERE school_id = ? AND duty_date >= ?
            """,
            (school_id, since.isoformat()),
        )
        return [DutyHistoryEntry(row["staff_id"], row["duty_type"]) for row in rows]

    def insert_assignments(
        self,
        assignments: list[DutyAssignment],
    ) -> list[DutyAssignment]:
        stored = []
        try:
            with self.conn:
                for assignment in assignments:
                    record = assignment.to_record()
                    cursor = self.conn.execute(
                        """
                        INSERT INTO duty_roster (
                            school_id, staff_id, duty_type, duty_date,
                            start_time, end_time, location
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            record["school_id"],
                            record["staff_id"],
                            record["duty_type"],
                            record["duty_date"],
                            record["start_time"],
                            record["end_time"],
                            record["location"],
                        ),
                    )
                    stored.append(replace(assignment, id=cursor.lastrowid))
        except sqlite3.Error as e:
            raise StorageError(f"Bulk insert of {len(assignments)} assignments failed: {e}") from e

        logger.debug("Inserted %d rows into duty_roster", len(stored))
        return stored

    def fetch_roster(
        self,
        school_id: str,
        start_date: date,
        end_date: date,
    ) -> list[RosterEntry]:
        rows = self._query(
            """
            SELECT r.*, s.first_name, s.last_name, s.position
            FROM duty_roster r
            LEFT JOIN staff s ON s.id = r.staff_id AND s.school_id = r.school_id
            WHERE r.school_id = ? AND r.duty_date >= ? AND r.duty_date <= ?
            ORDER BY r.duty_date, r.start_time, r.id
            """,
            (school_id, start_date.isoformat(), end_date.isoformat()),
        )
        return [
            RosterEntry(
                assignment=DutyAssignment.from_record(dict(row)),
                staff_first_name=row["first_name"] or "",
                staff_last_name=row["last_name"] or "",
                position=row["position"] or "",
            )
            for row in rows
        ]

    def _query(self, sql: str, params: tuple) -> list[sqlite3.Row]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Query failed: {e}") from e
