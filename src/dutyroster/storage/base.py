"""Store interface for staff, duty history and roster persistence."""

from abc import ABC, abstractmethod
from datetime import date

from dutyroster.domain.models import (
    DutyAssignment,
    DutyHistoryEntry,
    RosterEntry,
    StaffMember,
)
from dutyroster.errors import StorageError

__all__ = ["RosterStore", "StorageError"]


class RosterStore(ABC):
    """Abstract base class for the data store behind the roster.

    Every operation is scoped to one school. Implementations raise
    StorageError for any failure of the underlying backend.
    """

    @abstractmethod
    def fetch_active_staff(self, school_id: str) -> list[StaffMember]:
        """Get active staff for a school, in directory order."""
        pass

    @abstractmethod
    def fetch_recent_assignments(
        self,
        school_id: str,
        since: date,
    ) -> list[DutyHistoryEntry]:
        """Get assignments for a school dated on or after ``since``."""
        pass

    @abstractmethod
    def insert_assignments(
        self,
        assignments: list[DutyAssignment],
    ) -> list[DutyAssignment]:
        """Persist a batch atomically.

        Either every assignment is stored or none is.

        Returns:
            The stored assignments, with ids filled in.
        """
        pass

    @abstractmethod
    def fetch_roster(
        self,
        school_id: str,
        start_date: date,
        end_date: date,
    ) -> list[RosterEntry]:
        """Get stored assignments in a date range joined with staff details.

        Ordered by duty date, then start time.
        """
        pass

    @abstractmethod
    def add_staff(self, school_id: str, staff: StaffMember) -> StaffMember:
        """Register a staff member with a school."""
        pass
