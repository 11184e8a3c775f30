"""End-to-end smoke tests."""

from datetime import date, timedelta

from conftest import SCHOOL, TODAY, make_staff
from dutyroster.domain.models import DutyType, RosterRequest
from dutyroster.service import RosterService
from dutyroster.storage.sqlite_store import SQLiteRosterStore
from dutyroster.validation.validator import RosterValidator


def test_four_weeks_on_sqlite(tmp_path):
    """Generate a month of duties, read it back and validate it."""
    store = SQLiteRosterStore(tmp_path / "roster.db")
    store.init_db()
    staff = make_staff(6)
    for member in staff:
        store.add_staff(SCHOOL, member)

    service = RosterService(store, today=lambda: TODAY)
    duty_types = [dt.value for dt in DutyType]
    end = TODAY + timedelta(days=27)

    outcome = service.generate_duty_roster(SCHOOL, TODAY.isoformat(), end.isoformat(), duty_types)
    assert outcome["success"] is True
    assert outcome["count"] == 20 * 4

    entries = store.fetch_roster(SCHOOL, TODAY, end)
    assert len(entries) == 80
    assert all(e.assignment.duty_date.weekday() < 5 for e in entries)

    request = RosterRequest(SCHOOL, TODAY, end, duty_types)
    result = RosterValidator().validate([e.assignment for e in entries], request, staff)
    assert result.is_valid, [str(e) for e in result.errors]

    # 20 slots per duty type over 6 staff: everyone gets 3 or 4
    for duty_type in duty_types:
        counts = {}
        for e in entries:
            if e.assignment.duty_type == duty_type:
                counts[e.assignment.staff_id] = counts.get(e.assignment.staff_id, 0) + 1
        assert set(counts.values()) <= {3, 4}

    listed = service.get_roster(SCHOOL, TODAY.isoformat(), date(2024, 1, 15).isoformat())
    assert len(listed["data"]) == 4
    store.close()
