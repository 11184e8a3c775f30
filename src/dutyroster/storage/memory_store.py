"""In-memory store used by the demo command and tests."""

from dataclasses import replace
from datetime import date

from dutyroster.domain.models import (
    DutyAssignment,
    DutyHistoryEntry,
    RosterEntry,
    StaffMember,
)
from dutyroster.errors import StorageError
from dutyroster.storage.base import RosterStore


class InMemoryRosterStore(RosterStore):
    """Keeps staff and assignments in plain lists.

    Attributes:
        staff: school ID -> staff members in registration order.
        assignments: Every stored assignment, in insertion order.
        insert_calls: Number of insert_assignments calls made.
    """

    def __init__(self):
        self.staff: dict[str, list[StaffMember]] = {}
        self.assignments: list[DutyAssignment] = []
        self.insert_calls = 0
        self._next_id = 1

    def add_staff(self, school_id: str, staff: StaffMember) -> StaffMember:
        members = self.staff.setdefault(school_id, [])
        if any(m.id == staff.id for m in members):
            raise StorageError(f"Staff {staff.id} already exists in school {school_id}")
        members.append(staff)
        return staff

    def fetch_active_staff(self, school_id: str) -> list[StaffMember]:
        return [m for m in self.staff.get(school_id, []) if m.active]

    def fetch_recent_assignments(
        self,
        school_id: str,
        since: date,
    ) -> list[DutyHistoryEntry]:
        return [
            DutyHistoryEntry(a.staff_id, a.duty_type)
            for a in self.assignments
            if a.school_id == school_id and a.duty_date >= since
        ]

    def insert_assignments(
        self,
        assignments: list[DutyAssignment],
    ) -> list[DutyAssignment]:
        self.insert_calls += 1
        stored = []
        for assignment in assignments:
            stored.append(replace(assignment, id=self._next_id + len(stored)))
        self._next_id += len(stored)
        self.assignments.extend(stored)
        return stored

    def fetch_roster(
        self,
        school_id: str,
        start_date: date,
        end_date: date,
    ) -> list[RosterEntry]:
        members = {m.id: m for m in self.staff.get(school_id, [])}
        rows = [
            a for a in self.assignments
            if a.school_id == school_id and start_date <= a.duty_date <= end_date
        ]
        rows.sort(key=lambda a: (a.duty_date, a.start_time))

        entries = []
        for a in rows:
            member = members.get(a.staff_id)
            if member is None:
                entries.append(RosterEntry(assignment=a))
            else:
                entries.append(
                    RosterEntry(
                        assignment=a,
                        staff_first_name=member.first_name,
                        staff_last_name=member.last_name,
                        position=member.position,
                    )
                )
        return entries
