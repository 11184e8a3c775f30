"""Policy definitions for roster rules.

This module contains the configurable policies that the roster generator
consults: which dates are working days, and what time window and location
each duty type has. Policies are kept separate from the generator so they
can be tested and swapped independently.
"""

from abc import ABC, abstractmethod
from datetime import date, time, timedelta
from typing import Optional

from dutyroster.domain.models import DutyType, DutyWindow

DEFAULT_WINDOW = DutyWindow(time(7, 0), time(8, 0), "School Compound")

DUTY_WINDOWS: dict[str, DutyWindow] = {
    DutyType.MORNING_DUTY.value: DutyWindow(time(7, 0), time(8, 0), "Main Gate"),
    DutyType.LUNCH_DUTY.value: DutyWindow(time(12, 0), time(13, 0), "Dining Hall"),
    DutyType.GAMES_DUTY.value: DutyWindow(time(15, 0), time(16, 0), "Sports Field"),
    DutyType.CLOSING_DUTY.value: DutyWindow(time(16, 0), time(17, 0), "Main Gate"),
}


class DutyMetadataPolicy(ABC):
    """Abstract base class for duty metadata lookup."""

    @abstractmethod
    def get_window(self, duty_type: str) -> DutyWindow:
        """Get the full window (times and location) for a duty type."""
        pass

    def time_window(self, duty_type: str) -> tuple[time, time]:
        """Get (start, end) times for a duty type."""
        window = self.get_window(duty_type)
        return window.start, window.end

    def location(self, duty_type: str) -> str:
        """Get the location for a duty type."""
        return self.get_window(duty_type).location

    def is_known(self, duty_type: str) -> bool:
        """Check if a duty type has its own metadata rather than a fallback."""
        return True


class WorkingDayPolicy(ABC):
    """Abstract base class for working-day rules."""

    @abstractmethod
    def is_working_day(self, d: date) -> bool:
        """Check if duties are assigned on a date."""
        pass

    def working_days(self, start: date, end: date) -> list[date]:
        """List working days between two dates.

        Args:
            start: First date (inclusive).
            end: Last date (inclusive).

        Returns:
            Working days in ascending order. Empty when start is after end.
        """
        if start > end:
            return []
        # end may be date.max, so never step past it
        span = (end - start).days
        return [
            start + timedelta(days=offset)
            for offset in range(span + 1)
            if self.is_working_day(start + timedelta(days=offset))
        ]


class DefaultDutyMetadataPolicy(DutyMetadataPolicy):
    """Static duty table with a fixed fallback.

    Known duty types:
    - morning_duty: 07:00-08:00 at the Main Gate
    - lunch_duty: 12:00-13:00 in the Dining Hall
    - games_duty: 15:00-16:00 on the Sports Field
    - closing_duty: 16:00-17:00 at the Main Gate

    Any other identifier gets 07:00-08:00 in the School Compound.
    """

    def __init__(
        self,
        overrides: Optional[dict[str, DutyWindow]] = None,
        default: DutyWindow = DEFAULT_WINDOW,
    ):
        """Initialize the table.

        Args:
            overrides: Extra or replacement entries keyed by duty type.
            default: Window used for unknown duty types.
        """
        self.windows = dict(DUTY_WINDOWS)
        if overrides:
            self.windows.update(overrides)
        self.default = default

    def get_window(self, duty_type: str) -> DutyWindow:
        return self.windows.get(duty_type, self.default)

    def is_known(self, duty_type: str) -> bool:
        """Check if a duty type has its own table entry."""
        return duty_type in self.windows


class WeekdayPolicy(WorkingDayPolicy):
    """Monday to Friday are working days.

    Weekend days use Python's ``date.weekday()`` numbering, where
    Saturday is 5 and Sunday is 6.
    """

    def __init__(self, weekend_days: frozenset[int] = frozenset({5, 6})):
        self.weekend_days = weekend_days

    def is_working_day(self, d: date) -> bool:
        return d.weekday() not in self.weekend_days


_DEFAULT_METADATA = DefaultDutyMetadataPolicy()
_DEFAULT_WORKING_DAYS = WeekdayPolicy()


def working_days(start: date, end: date) -> list[date]:
    """Working days (Saturday and Sunday excluded) between two dates, inclusive."""
    return _DEFAULT_WORKING_DAYS.working_days(start, end)


def time_window(duty_type: str) -> tuple[time, time]:
    """Default (start, end) times for a duty type."""
    return _DEFAULT_METADATA.time_window(duty_type)


def location(duty_type: str) -> str:
    """Default location for a duty type."""
    return _DEFAULT_METADATA.location(duty_type)
