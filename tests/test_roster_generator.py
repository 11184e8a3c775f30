"""Tests for the roster generator."""

from datetime import date, time, timedelta

import pytest

from conftest import SCHOOL, TODAY, make_staff, seed_history
from dutyroster.domain.models import DutyHistoryEntry, RosterRequest, StaffMember
from dutyroster.domain.policies import working_days
from dutyroster.errors import NoEligibleStaffError, PersistenceError, StorageError
from dutyroster.scheduling.roster_generator import FAIRNESS_WINDOW_DAYS, RosterGenerator
from dutyroster.scheduling.workload import WorkloadCounter
from dutyroster.storage.memory_store import InMemoryRosterStore
from dutyroster.validation.validator import RosterValidator


class FailingInsertStore(InMemoryRosterStore):
    """Store whose bulk write is always rejected."""

    def insert_assignments(self, assignments):
        self.insert_calls += 1
        raise StorageError("duplicate key value violates constraint")


class FailingHistoryStore(InMemoryRosterStore):
    """Store whose history read fails."""

    def fetch_recent_assignments(self, school_id, since):
        raise StorageError("connection reset")


def request_for(start: date, end: date, duty_types: list[str]) -> RosterRequest:
    return RosterRequest(
        school_id=SCHOOL,
        start_date=start,
        end_date=end,
        duty_types=duty_types,
    )


class TestRosterGenerator:
    """Tests for RosterGenerator.generate."""

    @pytest.fixture
    def generator(self, staffed_store):
        return RosterGenerator(staffed_store, today=TODAY)

    def test_batch_size_is_days_times_duty_types(self, generator):
        """Two weeks with three duty types gives 10 x 3 assignments."""
        request = request_for(
            date(2024, 1, 15), date(2024, 1, 28), ["morning_duty", "lunch_duty", "games_duty"]
        )
        result = generator.generate(request)
        assert result.count == 30
        assert len(result.assignments) == 30

    def test_every_pair_covered_once(self, generator, staffed_store):
        """Each (working day, duty type) pair appears exactly once."""
        duty_types = ["morning_duty", "closing_duty"]
        request = request_for(date(2024, 1, 15), date(2024, 1, 26), duty_types)
        result = generator.generate(request)

        pairs = [(a.duty_date, a.duty_type) for a in result.assignments]
        expected = [
            (d, dt) for d in working_days(date(2024, 1, 15), date(2024, 1, 26)) for dt in duty_types
        ]
        assert pairs == expected

        staff = staffed_store.fetch_active_staff(SCHOOL)
        validation = RosterValidator().validate(result.assignments, request, staff)
        assert validation.is_valid, [str(e) for e in validation.errors]

    def test_no_weekend_assignments(self, generator):
        """No assignment lands on Saturday or Sunday."""
        request = request_for(date(2024, 1, 1), date(2024, 2, 29), ["lunch_duty"])
        result = generator.generate(request)
        assert result.count > 0
        assert all(a.duty_date.weekday() < 5 for a in result.assignments)

    def test_inactive_staff_never_assigned(self, generator):
        """Inactive staff are not part of the directory lookup."""
        request = request_for(date(2024, 1, 15), date(2024, 2, 9), ["lunch_duty"])
        result = generator.generate(request)
        assert "T999" not in {a.staff_id for a in result.assignments}

    def test_assignments_persisted_with_ids(self, generator, staffed_store):
        """The returned assignments are the stored records."""
        request = request_for(date(2024, 1, 15), date(2024, 1, 19), ["lunch_duty"])
        result = generator.generate(request)
        assert staffed_store.insert_calls == 1
        assert all(a.id is not None for a in result.assignments)
        assert staffed_store.assignments == result.assignments

    def test_metadata_filled_in(self, generator):
        """Windows and locations come from the duty table."""
        request = request_for(date(2024, 1, 15), date(2024, 1, 15), ["games_duty"])
        (assignment,) = generator.generate(request).assignments
        assert assignment.school_id == SCHOOL
        assert assignment.start_time == time(15, 0)
        assert assignment.end_time == time(16, 0)
        assert assignment.location == "Sports Field"

    def test_unknown_duty_type_uses_default_window(self, generator):
        """An unlisted duty type still gets valid assignments."""
        request = request_for(date(2024, 1, 15), date(2024, 1, 19), ["library_duty"])
        result = generator.generate(request)
        assert result.count == 5
        for a in result.assignments:
            assert (a.start_time, a.end_time) == (time(7, 0), time(8, 0))
            assert a.location == "School Compound"

    def test_reversed_range_is_empty_success(self, generator, staffed_store):
        """Start after end yields an empty result, not an error."""
        request = request_for(date(2024, 1, 19), date(2024, 1, 15), ["lunch_duty"])
        result = generator.generate(request)
        assert result.count == 0
        assert result.assignments == []
        assert staffed_store.insert_calls == 0

    def test_empty_duty_types_is_empty_success(self, generator):
        """No duty types yields an empty batch."""
        result = generator.generate(request_for(date(2024, 1, 15), date(2024, 1, 19), []))
        assert result.count == 0
        assert result.message == "Generated 0 duty assignments"

    def test_weekend_only_range_is_empty_success(self, generator):
        """A range with no working days yields an empty batch."""
        result = generator.generate(
            request_for(date(2024, 1, 13), date(2024, 1, 14), ["lunch_duty"])
        )
        assert result.count == 0


class TestFairness:
    """Tests for least-loaded selection."""

    def test_worked_example(self, store):
        """Counts A=2, B=0, C=1 give B, B, C, A, B over one week."""
        staff = [
            StaffMember(id="A", first_name="Alice", last_name="Wanjiru"),
            StaffMember(id="B", first_name="Brian", last_name="Otieno"),
            StaffMember(id="C", first_name="Carol", last_name="Mutua"),
        ]
        for member in staff:
            store.add_staff(SCHOOL, member)
        seed_history(store, "A", "lunch_duty", [date(2024, 1, 8), date(2024, 1, 9)])
        seed_history(store, "C", "lunch_duty", [date(2024, 1, 10)])

        generator = RosterGenerator(store, today=TODAY)
        result = generator.generate(
            request_for(date(2024, 1, 15), date(2024, 1, 19), ["lunch_duty"])
        )
        assert [a.staff_id for a in result.assignments] == ["B", "B", "C", "A", "B"]

    def test_history_outside_window_is_ignored(self, store):
        """Assignments older than the fairness window carry no weight."""
        staff = make_staff(2)
        for member in staff:
            store.add_staff(SCHOOL, member)
        old = TODAY - timedelta(days=FAIRNESS_WINDOW_DAYS + 1)
        seed_history(store, "T001", "lunch_duty", [old, old, old])

        generator = RosterGenerator(store, today=TODAY)
        result = generator.generate(
            request_for(date(2024, 1, 15), date(2024, 1, 15), ["lunch_duty"])
        )
        assert result.assignments[0].staff_id == "T001"

    def test_history_on_window_boundary_counts(self, store):
        """An assignment exactly fairness-window days ago is still counted."""
        staff = make_staff(2)
        for member in staff:
            store.add_staff(SCHOOL, member)
        seed_history(store, "T001", "lunch_duty", [TODAY - timedelta(days=FAIRNESS_WINDOW_DAYS)])

        generator = RosterGenerator(store, today=TODAY)
        result = generator.generate(
            request_for(date(2024, 1, 15), date(2024, 1, 15), ["lunch_duty"])
        )
        assert result.assignments[0].staff_id == "T002"

    def test_custom_fairness_window(self, store):
        """A shorter window drops older history."""
        for member in make_staff(2):
            store.add_staff(SCHOOL, member)
        seed_history(store, "T001", "lunch_duty", [TODAY - timedelta(days=10)])

        generator = RosterGenerator(store, fairness_window_days=7, today=TODAY)
        result = generator.generate(
            request_for(date(2024, 1, 15), date(2024, 1, 15), ["lunch_duty"])
        )
        assert result.assignments[0].staff_id == "T001"

    def test_history_of_other_school_ignored(self, store):
        """History is scoped to the requesting school."""
        for member in make_staff(2):
            store.add_staff(SCHOOL, member)
        seed_history(store, "T001", "lunch_duty", [date(2024, 1, 10)] * 3, school_id="other")

        generator = RosterGenerator(store, today=TODAY)
        result = generator.generate(
            request_for(date(2024, 1, 15), date(2024, 1, 15), ["lunch_duty"])
        )
        assert result.assignments[0].staff_id == "T001"

    def test_duty_types_balanced_independently(self, store):
        """Counts are per duty type, so one person can hold different types."""
        for member in make_staff(2):
            store.add_staff(SCHOOL, member)
        generator = RosterGenerator(store, today=TODAY)
        result = generator.generate(
            request_for(date(2024, 1, 15), date(2024, 1, 15), ["morning_duty", "lunch_duty"])
        )
        assert [a.staff_id for a in result.assignments] == ["T001", "T001"]

    def test_selection_always_current_minimum(self, store):
        """Each pick holds the minimum count and spread grows by at most one."""
        staff = make_staff(4)
        for member in staff:
            store.add_staff(SCHOOL, member)
        seed_history(store, "T002", "lunch_duty", [date(2024, 1, 3)] * 3)
        seed_history(store, "T003", "games_duty", [date(2024, 1, 4)])

        duty_types = ["morning_duty", "lunch_duty", "games_duty"]
        history = store.fetch_recent_assignments(SCHOOL, date(2023, 12, 16))
        result = RosterGenerator(store, today=TODAY).generate(
            request_for(date(2024, 1, 15), date(2024, 2, 23), duty_types)
        )

        replay = WorkloadCounter.from_history(staff, duty_types, history)
        for a in result.assignments:
            current = [replay.count(s.id, a.duty_type) for s in staff]
            assert replay.count(a.staff_id, a.duty_type) == min(current)
            before = replay.spread(a.duty_type)
            replay.increment(a.staff_id, a.duty_type)
            assert replay.spread(a.duty_type) <= before + 1

    def test_no_history_spreads_evenly(self, staffed_store):
        """Without history, four weeks over four staff gives five each."""
        result, stats = RosterGenerator(staffed_store, today=TODAY).generate_with_stats(
            request_for(date(2024, 1, 15), date(2024, 2, 9), ["lunch_duty"])
        )
        assert result.count == 20
        per_staff = {}
        for a in result.assignments:
            per_staff[a.staff_id] = per_staff.get(a.staff_id, 0) + 1
        assert set(per_staff.values()) == {5}
        assert stats["fairness_metrics"].spread["lunch_duty"] == 0

    def test_deterministic(self, store):
        """Identical inputs give identical rosters."""
        def run():
            s = InMemoryRosterStore()
            for member in make_staff(5):
                s.add_staff(SCHOOL, member)
            seed_history(s, "T003", "morning_duty", [date(2024, 1, 2)])
            result = RosterGenerator(s, today=TODAY).generate(
                request_for(
                    date(2024, 1, 15), date(2024, 3, 1), ["morning_duty", "lunch_duty"]
                )
            )
            return [(a.staff_id, a.duty_type, a.duty_date) for a in result.assignments]

        assert run() == run()

    def test_staff_order_breaks_ties(self, store):
        """Reversing the directory order reverses who goes first."""
        staff = make_staff(3)
        generator = RosterGenerator(store, today=TODAY)
        days = [date(2024, 1, 15)]

        forward = generator.plan(
            SCHOOL, staff, days, ["lunch_duty"],
            WorkloadCounter.from_history(staff, ["lunch_duty"], []),
        )
        backward = generator.plan(
            SCHOOL, list(reversed(staff)), days, ["lunch_duty"],
            WorkloadCounter.from_history(staff, ["lunch_duty"], []),
        )
        assert forward[0].staff_id == "T001"
        assert backward[0].staff_id == "T003"

    def test_plan_does_not_touch_store(self, store):
        """plan() is pure computation."""
        staff = make_staff(2)
        history = [DutyHistoryEntry("T001", "lunch_duty")]
        generator = RosterGenerator(store, today=TODAY)
        batch = generator.plan(
            SCHOOL, staff, [date(2024, 1, 15), date(2024, 1, 16)], ["lunch_duty"],
            WorkloadCounter.from_history(staff, ["lunch_duty"], history),
        )
        assert [a.staff_id for a in batch] == ["T002", "T001"]
        assert store.insert_calls == 0
        assert store.assignments == []


class TestFailures:
    """Tests for failure handling."""

    def test_no_staff_fails_before_write(self, store):
        """An empty directory raises and never writes."""
        generator = RosterGenerator(store, today=TODAY)
        with pytest.raises(NoEligibleStaffError) as exc_info:
            generator.generate(request_for(date(2024, 1, 15), date(2024, 1, 19), ["lunch_duty"]))
        assert str(exc_info.value) == "No active staff available"
        assert exc_info.value.school_id == SCHOOL
        assert store.insert_calls == 0

    def test_only_inactive_staff_fails(self, store):
        """Inactive staff do not count as eligible."""
        store.add_staff(SCHOOL, StaffMember(id="X", first_name="Gone", last_name="Away", active=False))
        with pytest.raises(NoEligibleStaffError):
            RosterGenerator(store, today=TODAY).generate(
                request_for(date(2024, 1, 15), date(2024, 1, 19), ["lunch_duty"])
            )

    def test_no_staff_fails_even_for_empty_range(self, store):
        """The staff precondition applies before the range is looked at."""
        with pytest.raises(NoEligibleStaffError):
            RosterGenerator(store, today=TODAY).generate(
                request_for(date(2024, 1, 19), date(2024, 1, 15), ["lunch_duty"])
            )

    def test_write_failure_raises_persistence_error(self):
        """A rejected bulk write surfaces the store error and stores nothing."""
        store = FailingInsertStore()
        for member in make_staff(2):
            store.add_staff(SCHOOL, member)

        with pytest.raises(PersistenceError) as exc_info:
            RosterGenerator(store, today=TODAY).generate(
                request_for(date(2024, 1, 15), date(2024, 1, 19), ["lunch_duty"])
            )
        assert "duplicate key" in str(exc_info.value)
        assert isinstance(exc_info.value.cause, StorageError)
        assert store.insert_calls == 1
        assert store.assignments == []

    def test_read_failure_aborts_before_write(self):
        """A failing history read propagates and nothing is written."""
        store = FailingHistoryStore()
        for member in make_staff(2):
            store.add_staff(SCHOOL, member)

        with pytest.raises(StorageError):
            RosterGenerator(store, today=TODAY).generate(
                request_for(date(2024, 1, 15), date(2024, 1, 19), ["lunch_duty"])
            )
        assert store.insert_calls == 0
