"""Duty roster generator.

This module provides the RosterGenerator class that assigns one staff
member to every (working day, duty type) pair in a date range. Selection
is greedy: each slot goes to the staff member with the fewest duties of
that type, counting both the trailing fairness window and the
assignments already made in the current run.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from dutyroster.domain.models import (
    DutyAssignment,
    RosterRequest,
    RosterResult,
    StaffMember,
)
from dutyroster.domain.policies import (
    DefaultDutyMetadataPolicy,
    DutyMetadataPolicy,
    WeekdayPolicy,
    WorkingDayPolicy,
)
from dutyroster.errors import NoEligibleStaffError, PersistenceError, StorageError
from dutyroster.scheduling.workload import WorkloadCounter
from dutyroster.storage.base import RosterStore

logger = logging.getLogger(__name__)

# Days of history, counted back from today, that weight new assignments.
FAIRNESS_WINDOW_DAYS = 30


class RosterGenerator:
    """Generates balanced duty rosters.

    The generator performs two reads (active staff, recent history), a
    deterministic in-memory computation, and one bulk write. It keeps no
    state between calls.

    Example:
        >>> generator = RosterGenerator(store)
        >>> request = RosterRequest(
        ...     school_id="school-1",
        ...     start_date=date(2024, 1, 15),
        ...     end_date=date(2024, 1, 19),
        ...     duty_types=["morning_duty", "lunch_duty"],
        ... )
        >>> result = generator.generate(request)
        >>> result.count
        10
    """

    def __init__(
        self,
        store: RosterStore,
        metadata_policy: Optional[DutyMetadataPolicy] = None,
        working_day_policy: Optional[WorkingDayPolicy] = None,
        fairness_window_days: int = FAIRNESS_WINDOW_DAYS,
        today: Optional[date] = None,
    ):
        """Initialize generator with a store and policies.

        Args:
            store: Staff directory, assignment history and roster persistence.
            metadata_policy: Time window and location lookup per duty type.
            working_day_policy: Rule for which dates receive duties.
            fairness_window_days: Length of the trailing history window.
            today: Reference date for the fairness window. Defaults to the
                current date at each call.
        """
        self.store = store
        self.metadata_policy = metadata_policy or DefaultDutyMetadataPolicy()
        self.working_day_policy = working_day_policy or WeekdayPolicy()
        self.fairness_window_days = fairness_window_days
        self.today = today

    def history_since(self) -> date:
        """First date included in the fairness window."""
        today = self.today or date.today()
        return today - timedelta(days=self.fairness_window_days)

    def generate(self, request: RosterRequest) -> RosterResult:
        """Generate and persist a roster.

        Args:
            request: Scope, date range and ordered duty types.

        Returns:
            RosterResult with the persisted assignments.

        Raises:
            NoEligibleStaffError: The scope has no active staff.
            StorageError: A read from the store failed.
            PersistenceError: The bulk write was rejected.
        """
        result, _ = self._run(request)
        return result

    def generate_with_stats(
        self,
        request: RosterRequest,
    ) -> tuple[RosterResult, dict]:
        """Generate a roster and return statistics.

        Args:
            request: Roster request.

        Returns:
            Tuple of (result, stats_dict).
        """
        return self._run(request)

    def _run(self, request: RosterRequest) -> tuple[RosterResult, dict]:
        school_id = request.school_id

        staff = self.store.fetch_active_staff(school_id)
        if not staff:
            logger.warning("No active staff for school %s", school_id)
            raise NoEligibleStaffError(school_id)

        history = self.store.fetch_recent_assignments(school_id, self.history_since())
        counter = WorkloadCounter.from_history(staff, request.duty_types, history)

        days = self.working_day_policy.working_days(request.start_date, request.end_date)
        batch = self.plan(school_id, staff, days, request.duty_types, counter)

        if batch:
            try:
                persisted = self.store.insert_assignments(batch)
            except StorageError as e:
                logger.error(
                    "Failed to persist %d assignments for school %s: %s",
                    len(batch), school_id, e,
                )
                raise PersistenceError(str(e), cause=e) from e
        else:
            persisted = []

        logger.info(
            "Generated %d duty assignments for school %s (%d working days, %d duty types)",
            len(persisted), school_id, len(days), len(request.duty_types),
        )

        result = RosterResult(assignments=persisted, count=len(persisted))
        stats = {
            "staff_count": len(staff),
            "history_rows": len(history),
            "working_days": len(days),
            "duty_types": len(request.duty_types),
            "fairness_metrics": counter.fairness_metrics(),
        }
        return result, stats

    def plan(
        self,
        school_id: str,
        staff: list[StaffMember],
        days: list[date],
        duty_types: list[str],
        counter: WorkloadCounter,
    ) -> list[DutyAssignment]:
        """Assign every (day, duty type) pair without touching the store.

        Days are filled in order and duty types in the given order within
        each day. The counter is updated after every pick.

        Args:
            school_id: Scope stamped on every assignment.
            staff: Active staff in directory order (used for tie-breaks).
            days: Working days in ascending order.
            duty_types: Duty types in caller order.
            counter: Workload counter covering staff x duty_types.

        Returns:
            List of len(days) * len(duty_types) assignments.
        """
        batch = []
        for day in days:
            for duty_type in duty_types:
                chosen = counter.least_loaded(staff, duty_type)
                window = self.metadata_policy.get_window(duty_type)

                batch.append(
                    DutyAssignment(
                        school_id=school_id,
                        staff_id=chosen.id,
                        duty_type=duty_type,
                        duty_date=day,
                        start_time=window.start,
                        end_time=window.end,
                        location=window.location,
                    )
                )
                counter.increment(chosen.id, duty_type)
                logger.debug(
                    "%s %s -> %s (count %d)",
                    day.isoformat(), duty_type, chosen.id,
                    counter.count(chosen.id, duty_type),
                )
        return batch
