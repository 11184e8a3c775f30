"""Per-staff, per-duty-type workload bookkeeping for one generation run."""

from typing import Iterable

from dutyroster.domain.models import DutyHistoryEntry, FairnessMetrics, StaffMember


class WorkloadCounter:
    """Tracks how many duties of each type every staff member holds.

    Keys are (staff_id, duty_type) pairs. The table is total over every
    staff member and every requested duty type: missing history means a
    count of zero, and history for other staff or duty types is ignored.

    Example:
        >>> counter = WorkloadCounter.from_history(staff, ["lunch_duty"], history)
        >>> chosen = counter.least_loaded(staff, "lunch_duty")
        >>> counter.increment(chosen.id, "lunch_duty")
    """

    def __init__(self, staff_ids: Iterable[str], duty_types: Iterable[str]):
        duty_types = list(duty_types)
        self._counts: dict[tuple[str, str], int] = {
            (staff_id, duty_type): 0
            for staff_id in staff_ids
            for duty_type in duty_types
        }

    @classmethod
    def from_history(
        cls,
        staff: list[StaffMember],
        duty_types: list[str],
        history: Iterable[DutyHistoryEntry],
    ) -> "WorkloadCounter":
        """Build a counter seeded with trailing-window history.

        Args:
            staff: Active staff members.
            duty_types: Duty types requested for this run.
            history: Past assignments inside the fairness window.
        """
        counter = cls((s.id for s in staff), duty_types)
        for entry in history:
            key = (entry.staff_id, entry.duty_type)
            if key in counter._counts:
                counter._counts[key] += 1
        return counter

    def count(self, staff_id: str, duty_type: str) -> int:
        """Current count for a staff member and duty type."""
        return self._counts[(staff_id, duty_type)]

    def increment(self, staff_id: str, duty_type: str) -> None:
        """Record one more duty of this type for the staff member."""
        self._counts[(staff_id, duty_type)] += 1

    def least_loaded(self, staff: list[StaffMember], duty_type: str) -> StaffMember:
        """Staff member with the smallest count for a duty type.

        Ties go to whoever comes first in ``staff``.
        """
        best = staff[0]
        best_count = self.count(best.id, duty_type)
        for member in staff[1:]:
            member_count = self.count(member.id, duty_type)
            if member_count < best_count:
                best, best_count = member, member_count
        return best

    def spread(self, duty_type: str) -> int:
        """Max count minus min count across staff for a duty type."""
        values = [c for (_, dt), c in self._counts.items() if dt == duty_type]
        if not values:
            return 0
        return max(values) - min(values)

    def as_dict(self) -> dict[str, dict[str, int]]:
        """Counts grouped as duty type -> staff ID -> count."""
        grouped: dict[str, dict[str, int]] = {}
        for (staff_id, duty_type), value in self._counts.items():
            grouped.setdefault(duty_type, {})[staff_id] = value
        return grouped

    def fairness_metrics(self) -> FairnessMetrics:
        return FairnessMetrics.calculate(self.as_dict())
