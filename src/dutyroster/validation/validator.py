"""Validation module for verifying roster correctness.

This module checks a generated batch against the roster invariants:
every (working day, duty type) pair is covered by exactly one staff
member, no duty falls on a non-working day, and every assignment
belongs to the request it was generated for.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from dutyroster.domain.models import DutyAssignment, RosterRequest, StaffMember
from dutyroster.domain.policies import (
    DefaultDutyMetadataPolicy,
    DutyMetadataPolicy,
    WeekdayPolicy,
    WorkingDayPolicy,
)


class ValidationErrorType(Enum):
    """Types of validation errors."""

    NON_WORKING_DAY = "non_working_day"
    DATE_OUTSIDE_RANGE = "date_outside_range"
    UNREQUESTED_DUTY_TYPE = "unrequested_duty_type"
    UNKNOWN_STAFF = "unknown_staff"
    WRONG_SCHOOL = "wrong_school"
    DUPLICATE_SLOT = "duplicate_slot"
    MISSING_SLOT = "missing_slot"
    BATCH_SIZE_MISMATCH = "batch_size_mismatch"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    staff_id: Optional[str] = None
    duty_date: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.staff_id:
            parts.append(f"Staff {self.staff_id}:")
        parts.append(self.message)
        if self.duty_date is not None:
            parts.append(f"({self.duty_date})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of validating a roster."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class RosterValidator:
    """Validates generated rosters against the roster invariants.

    Example:
        >>> validator = RosterValidator()
        >>> result = validator.validate(assignments, request, staff)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(
        self,
        working_day_policy: Optional[WorkingDayPolicy] = None,
        metadata_policy: Optional[DutyMetadataPolicy] = None,
    ):
        self.working_day_policy = working_day_policy or WeekdayPolicy()
        self.metadata_policy = metadata_policy or DefaultDutyMetadataPolicy()

    def validate(
        self,
        assignments: list[DutyAssignment],
        request: RosterRequest,
        staff: list[StaffMember],
    ) -> ValidationResult:
        """Validate a generated batch.

        Args:
            assignments: Assignments produced for the request.
            request: The request the batch was generated for.
            staff: Staff eligible for the request.

        Returns:
            ValidationResult with is_valid flag and any errors. Requested
            duty types with no metadata of their own are reported as warnings.
        """
        result = ValidationResult(is_valid=True)
        self._check_metadata(request, result)

        staff_ids = {s.id for s in staff}
        requested = set(request.duty_types)

        for assignment in assignments:
            self._validate_assignment(assignment, request, staff_ids, requested, result)

        self._validate_coverage(assignments, request, result)

        return result

    def _check_metadata(self, request: RosterRequest, result: ValidationResult) -> None:
        """Warn about requested duty types that fall back to default metadata."""
        for duty_type in dict.fromkeys(request.duty_types):
            if self.metadata_policy.is_known(duty_type):
                continue
            start, end = self.metadata_policy.time_window(duty_type)
            result.add_warning(
                f"Duty type {duty_type} has no metadata; using "
                f"{start.strftime('%H:%M')}-{end.strftime('%H:%M')} at "
                f"{self.metadata_policy.location(duty_type)}"
            )

    def _validate_assignment(
        self,
        assignment: DutyAssignment,
        request: RosterRequest,
        staff_ids: set[str],
        requested: set[str],
        result: ValidationResult,
    ) -> None:
        """Validate a single assignment."""
        day = assignment.duty_date.isoformat()

        if assignment.school_id != request.school_id:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.WRONG_SCHOOL,
                    message=f"Assignment belongs to school {assignment.school_id}",
                    staff_id=assignment.staff_id,
                    duty_date=day,
                )
            )

        if assignment.staff_id not in staff_ids:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.UNKNOWN_STAFF,
                    message="Staff member is not active in this school",
                    staff_id=assignment.staff_id,
                    duty_date=day,
                )
            )

        if not request.start_date <= assignment.duty_date <= request.end_date:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.DATE_OUTSIDE_RANGE,
                    message=(
                        f"Date outside {request.start_date.isoformat()} - "
                        f"{request.end_date.isoformat()}"
                    ),
                    staff_id=assignment.staff_id,
                    duty_date=day,
                )
            )

        if not self.working_day_policy.is_working_day(assignment.duty_date):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.NON_WORKING_DAY,
                    message=f"Duty on {assignment.duty_date.strftime('%A')}",
                    staff_id=assignment.staff_id,
                    duty_date=day,
                )
            )

        if assignment.duty_type not in requested:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.UNREQUESTED_DUTY_TYPE,
                    message=f"Duty type {assignment.duty_type} was not requested",
                    staff_id=assignment.staff_id,
                    duty_date=day,
                )
            )

    def _validate_coverage(
        self,
        assignments: list[DutyAssignment],
        request: RosterRequest,
        result: ValidationResult,
    ) -> None:
        """Check each (working day, duty type) pair is filled exactly once."""
        days = self.working_day_policy.working_days(request.start_date, request.end_date)
        slot_counts = Counter((a.duty_date, a.duty_type) for a in assignments)

        for day in days:
            for duty_type in request.duty_types:
                filled = slot_counts.get((day, duty_type), 0)
                if filled == 0:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.MISSING_SLOT,
                            message=f"No one assigned to {duty_type}",
                            duty_date=day.isoformat(),
                        )
                    )
                elif filled > 1:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.DUPLICATE_SLOT,
                            message=f"{filled} staff assigned to {duty_type}",
                            duty_date=day.isoformat(),
                            details={"count": filled},
                        )
                    )

        expected = len(days) * len(request.duty_types)
        if len(assignments) != expected:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.BATCH_SIZE_MISMATCH,
                    message=f"Expected {expected} assignments, got {len(assignments)}",
                    details={"expected": expected, "actual": len(assignments)},
                )
            )
