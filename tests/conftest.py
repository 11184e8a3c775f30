"""Shared fixtures for roster tests."""

from datetime import date, time

import pytest

from dutyroster.domain.models import DutyAssignment, StaffMember
from dutyroster.storage.memory_store import InMemoryRosterStore

SCHOOL = "school-1"
TODAY = date(2024, 1, 15)  # Monday


def make_staff(count: int) -> list[StaffMember]:
    names = ["Alice", "Brian", "Carol", "David", "Esther", "Felix", "Grace", "Henry"]
    return [
        StaffMember(id=f"T{i + 1:03d}", first_name=names[i % len(names)], last_name=f"Staff{i + 1}")
        for i in range(count)
    ]


def seed_history(
    store: InMemoryRosterStore,
    staff_id: str,
    duty_type: str,
    dates: list[date],
    school_id: str = SCHOOL,
) -> None:
    """Put past assignments straight into the store's table."""
    for d in dates:
        store.assignments.append(
            DutyAssignment(
                school_id=school_id,
                staff_id=staff_id,
                duty_type=duty_type,
                duty_date=d,
                start_time=time(12, 0),
                end_time=time(13, 0),
                location="Dining Hall",
            )
        )


@pytest.fixture
def store():
    return InMemoryRosterStore()


@pytest.fixture
def staffed_store(store):
    """Store with four active staff and one inactive member."""
    for member in make_staff(4):
        store.add_staff(SCHOOL, member)
    store.add_staff(
        SCHOOL,
        StaffMember(id="T999", first_name="Retired", last_name="Teacher", active=False),
    )
    return store
