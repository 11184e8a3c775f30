"""Domain models and business rules for duty rostering."""

from dutyroster.domain.models import (
    DutyAssignment,
    DutyHistoryEntry,
    DutyType,
    DutyWindow,
    FairnessMetrics,
    RosterEntry,
    RosterRequest,
    RosterResult,
    StaffMember,
)
from dutyroster.domain.policies import (
    DefaultDutyMetadataPolicy,
    DutyMetadataPolicy,
    WeekdayPolicy,
    WorkingDayPolicy,
    location,
    time_window,
    working_days,
)

__all__ = [
    # Models
    "DutyAssignment",
    "DutyHistoryEntry",
    "DutyType",
    "DutyWindow",
    "FairnessMetrics",
    "RosterEntry",
    "RosterRequest",
    "RosterResult",
    "StaffMember",
    # Policies
    "DefaultDutyMetadataPolicy",
    "DutyMetadataPolicy",
    "WeekdayPolicy",
    "WorkingDayPolicy",
    "location",
    "time_window",
    "working_days",
]
