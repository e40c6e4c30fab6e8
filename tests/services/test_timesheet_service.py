"""
TimesheetService tests.

Verifies:
- Logging an activity prepends, persists and syncs it
- Delete and enhance refuse unknown and submitted activities
- Dashboard figures for the current period
- Submitting a period: success, empty period, backend rejection
- Report rendering for the current period and for a past submission
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from timelog_kernel.domain.values import ActivityCategory, SubmissionStatus
from timelog_kernel.exceptions import (
    ActivityAlreadySubmittedError,
    ActivityNotFoundError,
    EmptyReportError,
    EmptySubmissionError,
    InvalidActivityError,
    SubmissionNotFoundError,
    SubmissionRejectedError,
)
from timelog_services.backend import SimulatedPayrollBackend, SubmitResult
from timelog_services.timesheet_service import TimesheetService


class RejectingBackend(SimulatedPayrollBackend):
    """Backend whose submissions always fail."""

    def submit_payroll(self, submission):
        return SubmitResult(success=False, remote_id=None)


class TestLogActivity:

    def test_defaults(self, service, clock):
        activity = service.log_activity("Oil change", hours="1.5")

        assert activity.category is ActivityCategory.MAINTENANCE
        assert activity.date == clock.today()
        assert service.activities() == (activity,)

    def test_prepends_and_syncs(self, service, backend, memory_store):
        first = service.log_activity("First", hours=1)
        second = service.log_activity("Second", hours=2, category=ActivityCategory.ADMIN)

        assert service.activities() == (second, first)
        assert backend.last_synced == (second, first)
        assert memory_store.save_count == 2

    def test_invalid_hours_saves_nothing(self, service, memory_store):
        with pytest.raises(InvalidActivityError):
            service.log_activity("Oil change", hours="0")
        assert memory_store.save_count == 0

    def test_unknown_category_saves_nothing(self, service, memory_store):
        with pytest.raises(InvalidActivityError) as exc_info:
            service.log_activity("Oil change", hours=1, category="Bogus")
        assert exc_info.value.field == "category"
        assert memory_store.save_count == 0

    def test_narrative_fields(self, service):
        activity = service.log_activity(
            "Fleet audit", hours=3, challenges="Missing paperwork",
        )
        assert activity.narrative == {"challenges": "Missing paperwork"}

    def test_logs_with_activity_context(self, service, captured_logs):
        activity = service.log_activity("Oil change", hours=1)

        logged = [r for r in captured_logs() if r["message"] == "activity_logged"]
        assert logged
        assert logged[0]["activity_id"] == str(activity.id)


class TestDeleteActivity:

    def test_delete(self, service):
        activity = service.log_activity("Oil change", hours=1)
        service.delete_activity(activity.id)

        assert service.activities() == ()

    def test_unknown(self, service):
        with pytest.raises(ActivityNotFoundError):
            service.delete_activity(uuid4())

    def test_submitted_refused(self, service):
        activity = service.log_activity("Oil change", hours=1)
        submission = service.submit_period()

        with pytest.raises(ActivityAlreadySubmittedError) as exc_info:
            service.delete_activity(activity.id)
        assert exc_info.value.submission_id == str(submission.id)


class TestEnhanceAndSuggest:

    def test_enhance_replaces_description(self, service, fake_assistant):
        activity = service.log_activity("Tow", hours=1, description="towed car")
        fake_assistant.enhanced_text = "Safely recovered and transported a client vehicle."

        updated = service.enhance_description(activity.id)

        assert updated.description == fake_assistant.enhanced_text
        assert service.get_activity(activity.id).description == fake_assistant.enhanced_text
        assert ("enhance", ("Tow", "towed car")) in fake_assistant.calls

    def test_enhance_fallback_saves_nothing(self, service, memory_store):
        activity = service.log_activity("Tow", hours=1, description="towed car")
        saves = memory_store.save_count

        assert service.enhance_description(activity.id) == activity
        assert memory_store.save_count == saves

    def test_enhance_unknown(self, service):
        with pytest.raises(ActivityNotFoundError):
            service.enhance_description(uuid4())

    def test_suggest_category_delegates(self, service, fake_assistant):
        assert service.suggest_category("  Cut spare key ") is ActivityCategory.LOCKSMITH
        assert fake_assistant.calls == [("classify", ("Cut spare key",))]

    def test_suggest_category_empty_task(self, service, fake_assistant):
        assert service.suggest_category("   ") is ActivityCategory.MAINTENANCE
        assert fake_assistant.calls == []


class TestDashboard:

    def test_current_period_figures(self, service):
        service.log_activity("A", hours="2", category=ActivityCategory.ADMIN)
        service.log_activity("B", hours="1.5", category=ActivityCategory.LOCKSMITH)
        service.log_activity("Old", hours="4", on=date(2024, 1, 20))

        stats = service.dashboard()

        assert stats.period.label == "First Half of February"
        assert stats.total_hours == Decimal("3.5")
        assert stats.activity_count == 2
        assert stats.deadline_display == "Feb 14, 2024"
        assert not stats.is_urgent
        assert not stats.is_submission_day
        assert list(stats.hours_by_category) == [ActivityCategory.LOCKSMITH, ActivityCategory.ADMIN]

    def test_urgent_on_submission_day(self, service, clock):
        clock.set_time(datetime(2024, 2, 14, 9, 0, tzinfo=timezone.utc))

        stats = service.dashboard()

        assert stats.is_urgent
        assert stats.is_submission_day

    def test_explicit_reference(self, service):
        stats = service.dashboard(datetime(2024, 3, 28, 12, 0, tzinfo=timezone.utc))

        assert stats.period.label == "Second Half of March"
        assert stats.is_urgent
        assert stats.activity_count == 0

    def test_current_period_activities(self, service):
        inside = service.log_activity("Inside", hours=1)
        service.log_activity("Outside", hours=1, on=date(2024, 2, 20))

        assert service.current_period_activities() == (inside,)


class TestSubmitPeriod:

    def test_submit(self, service, clock, sleeps):
        older = service.log_activity("Older", hours="1")
        newer = service.log_activity("Newer", hours="2.5")
        service.log_activity("Next period", hours=8, on=date(2024, 2, 20))

        submission = service.submit_period()

        assert submission.period_label == "First Half of February"
        assert submission.total_hours == Decimal("3.5")
        assert submission.activity_count == 2
        assert [a.id for a in submission.activities] == [newer.id, older.id]
        assert submission.submitted_at == clock.now()
        assert submission.status is SubmissionStatus.PENDING
        assert submission.remote_id.startswith("REM-")
        assert service.submissions() == (submission,)
        assert service.get_activity(older.id).submitted
        assert service.current_period_activities() == ()
        assert 2.0 in sleeps

    def test_newest_submission_first(self, service, clock):
        service.log_activity("Jan", hours=1, on=date(2024, 1, 20))
        first = service.submit_period(datetime(2024, 1, 29, tzinfo=timezone.utc))
        service.log_activity("Feb", hours=1)
        second = service.submit_period()

        assert service.submissions() == (second, first)

    def test_empty_period(self, service):
        service.log_activity("Elsewhere", hours=1, on=date(2024, 3, 1))
        with pytest.raises(EmptySubmissionError) as exc_info:
            service.submit_period()
        assert exc_info.value.period_label == "First Half of February"

    def test_second_submit_is_empty(self, service):
        service.log_activity("Once", hours=1)
        service.submit_period()
        with pytest.raises(EmptySubmissionError):
            service.submit_period()

    def test_rejected_changes_nothing(self, memory_store, fake_assistant, clock, config):
        rejecting = RejectingBackend(sleep=lambda seconds: None)
        service = TimesheetService(memory_store, fake_assistant, rejecting, clock, config)
        activity = service.log_activity("Oil change", hours=1)
        before = memory_store.load()

        with pytest.raises(SubmissionRejectedError):
            service.submit_period()

        assert memory_store.load() == before
        assert not service.get_activity(activity.id).submitted

    def test_get_submission_unknown(self, service):
        with pytest.raises(SubmissionNotFoundError):
            service.get_submission(uuid4())


class TestReports:

    def test_current_period_report(self, service, fake_assistant, tmp_path):
        service.log_activity("Cut keys", hours="1.5", category=ActivityCategory.LOCKSMITH)

        rendered = service.build_report(tmp_path)

        assert rendered.path == tmp_path / "WK_Report_First_Half_of_February.pdf"
        assert rendered.path.read_bytes().startswith(b"%PDF")
        assert rendered.total_hours == Decimal("1.5")
        assert fake_assistant.calls[-1][0] == "summarize"

    def test_empty_current_period(self, service, fake_assistant, tmp_path):
        with pytest.raises(EmptyReportError):
            service.build_report(tmp_path)
        assert fake_assistant.calls == []

    def test_empty_selection_is_not_summarized(self, service, fake_assistant, tmp_path):
        with pytest.raises(EmptyReportError) as exc_info:
            service.build_report(tmp_path, activities=[])
        assert "Custom Selection" in str(exc_info.value)
        assert not any(name == "summarize" for name, _ in fake_assistant.calls)
        assert list(tmp_path.iterdir()) == []

    def test_submission_report(self, service, tmp_path):
        service.log_activity("Cut keys", hours="1.5")
        submission = service.submit_period()

        rendered = service.build_submission_report(submission.id, tmp_path)

        assert rendered.activity_count == 1
        assert rendered.path.name == "WK_Report_Feb_1,_2024_-_Feb_14,_2024.pdf"
