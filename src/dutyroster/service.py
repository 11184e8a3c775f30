"""Caller-facing roster operations.

RosterService is the boundary the UI and CLI talk to. Every operation
returns a tagged dict (``{"success": True, ...}`` or
``{"success": False, "error": ...}``) so callers can render a message
and offer a retry; no exception escapes it.
"""

import logging
from datetime import date
from typing import Callable, Optional

from dutyroster.domain.models import RosterRequest
from dutyroster.errors import RosterError, StorageError
from dutyroster.scheduling.roster_generator import FAIRNESS_WINDOW_DAYS, RosterGenerator
from dutyroster.storage.base import RosterStore

logger = logging.getLogger(__name__)


class RosterService:
    """Generates and reads rosters for one store.

    Example:
        >>> service = RosterService(store)
        >>> service.generate_duty_roster(
        ...     "school-1", "2024-01-15", "2024-01-19", ["lunch_duty"]
        ... )
        {'success': True, 'count': 5, 'message': 'Generated 5 duty assignments'}
    """

    def __init__(
        self,
        store: RosterStore,
        fairness_window_days: int = FAIRNESS_WINDOW_DAYS,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize the service.

        Args:
            store: Backend for staff, history and roster rows.
            fairness_window_days: Trailing history window for new rosters.
            today: Returns the reference date for the fairness window.
        """
        self.store = store
        self.fairness_window_days = fairness_window_days
        self.today = today or date.today

    def generate_duty_roster(
        self,
        school_id: str,
        start_date: str,
        end_date: str,
        duty_types: list[str],
    ) -> dict:
        """Generate and store a roster for a date range.

        Args:
            school_id: Scope of the roster.
            start_date: First date, YYYY-MM-DD (inclusive).
            end_date: Last date, YYYY-MM-DD (inclusive).
            duty_types: Duty type identifiers in the order they are filled.

        Returns:
            ``{"success": True, "count": n, "message": ...}`` or
            ``{"success": False, "error": ...}``.
        """
        try:
            request = RosterRequest.from_iso(school_id, start_date, end_date, duty_types)
            generator = RosterGenerator(
                self.store,
                fairness_window_days=self.fairness_window_days,
                today=self.today(),
            )
            result = generator.generate(request)
        except (RosterError, StorageError, ValueError, TypeError, OverflowError) as e:
            logger.error("Roster generation failed for school %s: %s", school_id, e)
            return {"success": False, "error": str(e)}

        return {"success": True, "count": result.count, "message": result.message}

    def get_roster(self, school_id: str, start_date: str, end_date: str) -> dict:
        """Read stored roster entries for a date range.

        Returns:
            ``{"success": True, "data": [entry dicts]}`` ordered by date and
            start time, or ``{"success": False, "error": ...}``.
        """
        try:
            entries = self.store.fetch_roster(
                school_id,
                date.fromisoformat(start_date),
                date.fromisoformat(end_date),
            )
        except (StorageError, ValueError, TypeError) as e:
            logger.error("Roster lookup failed for school %s: %s", school_id, e)
            return {"success": False, "error": str(e)}

        return {"success": True, "data": [entry.to_dict() for entry in entries]}
