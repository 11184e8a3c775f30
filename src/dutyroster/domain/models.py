"""Domain models for the duty roster system.

This module contains the core data structures shared by the generator,
the stores and the output layer: staff members, duty types, duty
assignments and roster results.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Optional


class DutyType(Enum):
    """Known duty types.

    Duty types travel through the generator as plain string identifiers
    (the enum values). Identifiers not listed here are still valid and
    fall back to default metadata.
    """

    MORNING_DUTY = "morning_duty"  # Gate duty before classes
    LUNCH_DUTY = "lunch_duty"  # Dining hall supervision
    GAMES_DUTY = "games_duty"  # Sports field supervision
    CLOSING_DUTY = "closing_duty"  # Gate duty after classes


@dataclass(frozen=True)
class StaffMember:
    """A member of staff who can be put on duty.

    Attributes:
        id: Opaque identifier from the staff directory.
        first_name: Given name.
        last_name: Family name.
        position: Job title, informational only.
        active: Inactive staff are never returned by the directory lookup.
    """

    id: str
    first_name: str
    last_name: str
    position: str = ""
    active: bool = True

    @property
    def name(self) -> str:
        """Display name."""
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class DutyWindow:
    """Static time window and location for a duty type."""

    start: time
    end: time
    location: str


@dataclass(frozen=True)
class DutyAssignment:
    """One staff member on one duty type on one date.

    Attributes:
        school_id: Scope the assignment belongs to.
        staff_id: ID of the assigned staff member.
        duty_type: Duty type identifier.
        duty_date: Calendar date of the duty.
        start_time: Start of the duty window.
        end_time: End of the duty window.
        location: Where the duty takes place.
        id: Store-assigned identifier, None until persisted.
    """

    school_id: str
    staff_id: str
    duty_type: str
    duty_date: date
    start_time: time
    end_time: time
    location: str
    id: Optional[int] = None

    def to_record(self) -> dict:
        """Row representation used by the stores."""
        return {
            "school_id": self.school_id,
            "staff_id": self.staff_id,
            "duty_type": self.duty_type,
            "duty_date": self.duty_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "location": self.location,
        }

    @classmethod
    def from_record(cls, record: dict) -> "DutyAssignment":
        """Build an assignment from a store row."""
        return cls(
            school_id=record["school_id"],
            staff_id=record["staff_id"],
            duty_type=record["duty_type"],
            duty_date=date.fromisoformat(record["duty_date"]),
            start_time=time.fromisoformat(record["start_time"]),
            end_time=time.fromisoformat(record["end_time"]),
            location=record["location"],
            id=record.get("id"),
        )


@dataclass(frozen=True)
class DutyHistoryEntry:
    """A past assignment as seen by the fairness bookkeeping."""

    staff_id: str
    duty_type: str


@dataclass
class RosterRequest:
    """Request parameters for generating a roster.

    Attributes:
        school_id: Scope all reads and writes are filtered to.
        start_date: First date of the range (inclusive).
        end_date: Last date of the range (inclusive).
        duty_types: Duty type identifiers in the order they are filled each day.
    """

    school_id: str
    start_date: date
    end_date: date
    duty_types: list[str] = field(default_factory=list)

    @classmethod
    def from_iso(
        cls,
        school_id: str,
        start_date: str,
        end_date: str,
        duty_types: list[str],
    ) -> "RosterRequest":
        """Create a request from ISO calendar date strings.

        Raises:
            ValueError: If either date is not a valid YYYY-MM-DD string, or
                duty_types is a single string rather than a list.
            TypeError: If either date is not a string.
        """
        if isinstance(duty_types, str):
            raise ValueError("duty_types must be a list of duty type identifiers, not a string")
        return cls(
            school_id=school_id,
            start_date=date.fromisoformat(start_date),
            end_date=date.fromisoformat(end_date),
            duty_types=list(duty_types),
        )


@dataclass
class RosterResult:
    """Outcome of a successful generation run."""

    assignments: list[DutyAssignment] = field(default_factory=list)
    count: int = 0

    @property
    def message(self) -> str:
        return f"Generated {self.count} duty assignments"


@dataclass(frozen=True)
class RosterEntry:
    """A stored assignment joined with its staff member, for display."""

    assignment: DutyAssignment
    staff_first_name: str = ""
    staff_last_name: str = ""
    position: str = ""

    @property
    def staff_name(self) -> str:
        name = f"{self.staff_first_name} {self.staff_last_name}".strip()
        return name or self.assignment.staff_id

    def to_dict(self) -> dict:
        record = self.assignment.to_record()
        record["id"] = self.assignment.id
        record["staff"] = {
            "first_name": self.staff_first_name,
            "last_name": self.staff_last_name,
            "position": self.position,
        }
        return record


@dataclass
class FairnessMetrics:
    """Per-duty-type workload distribution.

    Attributes:
        counts: duty type -> staff ID -> assignment count (history + run).
        spread: duty type -> max count minus min count across staff.
    """

    counts: dict[str, dict[str, int]] = field(default_factory=dict)
    spread: dict[str, int] = field(default_factory=dict)

    @classmethod
    def calculate(cls, counts: dict[str, dict[str, int]]) -> "FairnessMetrics":
        """Calculate spreads from per-type counts."""
        spread = {}
        for duty_type, per_staff in counts.items():
            values = list(per_staff.values())
            spread[duty_type] = max(values) - min(values) if values else 0
        return cls(counts=counts, spread=spread)

    @property
    def max_spread(self) -> int:
        """Largest spread over all duty types."""
        return max(self.spread.values(), default=0)
