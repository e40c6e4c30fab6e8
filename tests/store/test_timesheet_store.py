"""
TimesheetStore tests: the SQLite-backed store and the in-memory store.

Verifies:
- Round trip preserves newest-first order of activities and submissions
- Decimal hours and timezone-aware submission instants survive SQLite
- Submission snapshots are independent copies of the activity log
- save() replaces the previous state entirely
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from timelog_kernel.domain.payroll_period import resolve_payroll_period
from timelog_kernel.domain.values import (
    Activity,
    ActivityCategory,
    Submission,
    TimesheetState,
)
from timelog_kernel.exceptions import StoreNotInitializedError
from timelog_kernel.store.memory import InMemoryTimesheetStore
from timelog_kernel.store.sql import SqlTimesheetStore

TZ = timezone(timedelta(hours=3))


def _state() -> tuple[TimesheetState, Submission]:
    older = Activity.create("Duplicate transponder key", "0.25", date(2024, 2, 2),
                            category=ActivityCategory.LOCKSMITH,
                            accomplishments="Programmed two fobs")
    newer = Activity.create("Drive customer home", "1.75", date(2024, 2, 16),
                            category=ActivityCategory.TRANSPORT, description="Round trip")
    state = TimesheetState().add_activity(older).add_activity(newer)
    submission = Submission.capture(
        resolve_payroll_period(date(2024, 2, 2)),
        [older],
        datetime(2024, 2, 14, 17, 30, tzinfo=TZ),
    ).with_remote_id("REM-777")
    return state.record_submission(submission), submission


class TestSqlTimesheetStore:

    def test_empty_database_loads_empty_state(self, sql_store):
        assert sql_store.load() == TimesheetState()

    def test_round_trip(self, sql_store):
        state, _ = _state()
        sql_store.save(state)

        assert sql_store.load() == state

    def test_order_preserved(self, sql_store):
        state, _ = _state()
        sql_store.save(state)

        loaded = sql_store.load()
        assert [a.task for a in loaded.activities] == [
            "Drive customer home", "Duplicate transponder key",
        ]

    def test_decimal_and_timezone_preserved(self, sql_store):
        state, submission = _state()
        sql_store.save(state)

        loaded = sql_store.load().submissions[0]
        assert loaded.total_hours == Decimal("0.25")
        assert isinstance(loaded.total_hours, Decimal)
        assert loaded.submitted_at == submission.submitted_at
        assert loaded.submitted_at.utcoffset() == timedelta(hours=3)

    def test_snapshot_survives_activity_deletion(self, sql_store):
        state, submission = _state()
        sql_store.save(state)

        captured_id = submission.activities[0].id
        sql_store.save(sql_store.load().remove_activity(captured_id))

        loaded = sql_store.load()
        assert loaded.find_activity(captured_id) is None
        assert loaded.submissions[0].activities[0].id == captured_id
        assert loaded.submissions[0].activities[0].accomplishments == "Programmed two fobs"

    def test_save_replaces_previous_state(self, sql_store):
        state, _ = _state()
        sql_store.save(state)
        sql_store.save(TimesheetState())

        assert sql_store.load() == TimesheetState()

    def test_uninitialized_engine(self):
        from timelog_kernel.db.engine import reset_engine

        reset_engine()
        with pytest.raises(StoreNotInitializedError):
            SqlTimesheetStore().load()


class TestInMemoryTimesheetStore:

    def test_round_trip_and_save_count(self):
        store = InMemoryTimesheetStore()
        state, _ = _state()
        store.save(state)

        assert store.load() is state
        assert store.save_count == 1

    def test_initial_state(self):
        state, _ = _state()
        assert InMemoryTimesheetStore(state).load() == state
