"""
timelog_services.timesheet_service -- Timesheet orchestration.

Responsibility:
    The one object a front end talks to.  Logs, deletes and polishes
    activities, computes the dashboard for the current payroll period,
    submits a period to the payroll backend and renders PDF reports.

Architecture position:
    Services -- stateful orchestration over the kernel.  Composes a
    ``TimesheetStore``, a ``TextAssistant``, the payroll backend and a
    ``Clock``; every collaborator is injected.

Invariants enforced:
    - Activities and submissions are persisted newest first.
    - Every change to the activity list is saved, then synced to the
      backend.
    - A period is submitted only with at least one unsubmitted activity
      inside it; a rejected submission leaves the timesheet untouched.
    - Submitted activities can be neither deleted nor edited.

Failure modes:
    - ActivityNotFoundError / SubmissionNotFoundError: unknown id.
    - ActivityAlreadySubmittedError: delete or edit of a submitted entry.
    - InvalidActivityError: empty task or non-positive hours.
    - EmptySubmissionError: nothing to submit in the current period.
    - SubmissionRejectedError: the backend did not accept the submission.
    - EmptyReportError: report requested for no activities.

Usage:
    service = TimesheetService(store, assistant, backend, SystemClock(), config)
    service.log_activity("Replace brake pads", hours="2.5",
                         category=ActivityCategory.MAINTENANCE)
    stats = service.dashboard()
    submission = service.submit_period()
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from pathlib import Path
from uuid import UUID

from timelog_config.schema import TimelogConfig
from timelog_kernel.domain.clock import Clock
from timelog_kernel.domain.payroll_period import (
    PayrollPeriod,
    format_display_date,
    is_deadline_approaching,
    is_submission_day,
    resolve_payroll_period,
)
from timelog_kernel.domain.values import (
    DEFAULT_CATEGORY,
    Activity,
    ActivityCategory,
    Submission,
    TimesheetState,
    hours_by_category,
    period_activities,
    total_hours,
)
from timelog_kernel.exceptions import (
    ActivityAlreadySubmittedError,
    ActivityNotFoundError,
    EmptyReportError,
    EmptySubmissionError,
    SubmissionNotFoundError,
    SubmissionRejectedError,
)
from timelog_kernel.logging_config import LogContext, get_logger
from timelog_kernel.store.base import TimesheetStore
from timelog_services.assistant import TextAssistant
from timelog_services.backend import SimulatedPayrollBackend
from timelog_services.report import RenderedReport, render_period_report

logger = get_logger("services.timesheet")


@dataclass(frozen=True)
class DashboardStats:
    """Figures shown on the dashboard for one payroll period."""
    period: PayrollPeriod
    total_hours: Decimal
    activity_count: int
    deadline_display: str
    is_urgent: bool
    is_submission_day: bool
    hours_by_category: dict[ActivityCategory, Decimal]


class TimesheetService:
    """Orchestrates the staff time log.

    Args:
        store: Where the timesheet state lives.
        assistant: Text assistant for polishing, classifying and summarising.
        backend: Payroll backend receiving syncs and submissions.
        clock: Source of "now".
        config: Runtime configuration; defaults apply when omitted.
    """

    def __init__(
        self,
        store: TimesheetStore,
        assistant: TextAssistant,
        backend: SimulatedPayrollBackend,
        clock: Clock,
        config: TimelogConfig | None = None,
    ):
        self._store = store
        self._assistant = assistant
        self._backend = backend
        self._clock = clock
        self._config = config or TimelogConfig()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def activities(self) -> tuple[Activity, ...]:
        return self._store.load().activities

    def submissions(self) -> tuple[Submission, ...]:
        return self._store.load().submissions

    def get_activity(self, activity_id: UUID) -> Activity:
        activity = self._store.load().find_activity(activity_id)
        if activity is None:
            raise ActivityNotFoundError(str(activity_id))
        return activity

    def get_submission(self, submission_id: UUID) -> Submission:
        submission = self._store.load().find_submission(submission_id)
        if submission is None:
            raise SubmissionNotFoundError(str(submission_id))
        return submission

    def current_period(self, at: date | None = None) -> PayrollPeriod:
        return resolve_payroll_period(at if at is not None else self._clock.now())

    def current_period_activities(self, at: date | None = None) -> tuple[Activity, ...]:
        """Unsubmitted activities inside the period containing ``at``."""
        return period_activities(self.activities(), self.current_period(at))

    def dashboard(self, at: datetime | None = None) -> DashboardStats:
        now = at if at is not None else self._clock.now()
        period = resolve_payroll_period(now)
        pending = period_activities(self.activities(), period)
        schedule = self._config.schedule
        today = now.date() if isinstance(now, datetime) else now
        moment = now if isinstance(now, datetime) else datetime.combine(now, datetime.min.time())

        return DashboardStats(
            period=period,
            total_hours=total_hours(pending),
            activity_count=len(pending),
            deadline_display=format_display_date(period.deadline),
            is_urgent=is_deadline_approaching(
                period.deadline,
                moment,
                window=timedelta(hours=schedule.deadline_warning_hours),
            ),
            is_submission_day=is_submission_day(today, schedule.submission_days),
            hours_by_category=hours_by_category(pending),
        )

    # ------------------------------------------------------------------
    # Activity commands
    # ------------------------------------------------------------------

    def log_activity(
        self,
        task: str,
        *,
        hours: Decimal | int | str,
        category: ActivityCategory | None = None,
        on: date | None = None,
        description: str = "",
        **narrative: str,
    ) -> Activity:
        """Record a new activity at the top of the log.

        ``category`` defaults to Maintenance and ``on`` to today.
        """
        activity = Activity.create(
            task,
            hours,
            on if on is not None else self._clock.today(),
            category=category or DEFAULT_CATEGORY,
            description=description,
            **narrative,
        )
        with LogContext.bind(activity_id=str(activity.id)):
            state = self._store.load().add_activity(activity)
            self._commit(state)
            logger.info(
                "activity_logged",
                extra={
                    "category": activity.category.value,
                    "work_date": activity.date,
                    "duration_hours": activity.duration_hours,
                },
            )
        return activity

    def delete_activity(self, activity_id: UUID) -> None:
        with LogContext.bind(activity_id=str(activity_id)):
            state = self._store.load()
            activity = state.find_activity(activity_id)
            if activity is None:
                raise ActivityNotFoundError(str(activity_id))
            if activity.submitted:
                raise ActivityAlreadySubmittedError(
                    str(activity_id),
                    str(activity.submission_id) if activity.submission_id else None,
                )
            self._commit(state.remove_activity(activity_id))
            logger.info("activity_deleted")

    def enhance_description(self, activity_id: UUID) -> Activity:
        """Replace the description with the assistant's polished version.

        The activity is returned unchanged (and nothing is saved) when the
        assistant falls back to the existing text.
        """
        with LogContext.bind(activity_id=str(activity_id)):
            state = self._store.load()
            activity = state.find_activity(activity_id)
            if activity is None:
                raise ActivityNotFoundError(str(activity_id))
            if activity.submitted:
                raise ActivityAlreadySubmittedError(
                    str(activity_id),
                    str(activity.submission_id) if activity.submission_id else None,
                )

            polished = self._assistant.enhance(activity.task, activity.description)
            if polished == activity.description:
                logger.info("description_unchanged")
                return activity

            updated = activity.with_description(polished)
            self._commit(state.replace_activity(updated))
            logger.info(
                "description_enhanced",
                extra={"length_before": len(activity.description), "length_after": len(polished)},
            )
            return updated

    def suggest_category(self, task: str) -> ActivityCategory:
        if not (task or "").strip():
            return DEFAULT_CATEGORY
        return self._assistant.classify(task.strip())

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit_period(self, at: datetime | None = None) -> Submission:
        """Submit the current period's unsubmitted activities for payroll.

        Raises:
            EmptySubmissionError: nothing to submit.
            SubmissionRejectedError: the backend refused; nothing changes.
        """
        period = self.current_period(at)
        with LogContext.bind(period_code=period.period_code):
            state = self._store.load()
            pending = period_activities(state.activities, period)
            if not pending:
                raise EmptySubmissionError(period.label)

            submission = Submission.capture(period, pending, submitted_at=self._clock.now())
            with LogContext.bind(submission_id=str(submission.id)):
                result = self._backend.submit_payroll(submission)
                if not result.success:
                    logger.warning(
                        "submission_rejected",
                        extra={"remote_id": result.remote_id},
                    )
                    raise SubmissionRejectedError(str(submission.id), result.remote_id)
                if result.remote_id:
                    submission = submission.with_remote_id(result.remote_id)

                self._commit(state.record_submission(submission))
                logger.info(
                    "period_submitted",
                    extra={
                        "period_label": period.label,
                        "remote_id": submission.remote_id,
                        "activity_count": submission.activity_count,
                        "total_hours": submission.total_hours,
                    },
                )
        return submission

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def build_report(
        self,
        output_dir: Path,
        activities: Sequence[Activity] | None = None,
        label: str | None = None,
    ) -> RenderedReport:
        """Render a PDF for ``activities`` (default: the current period's)."""
        if activities is None:
            period = self.current_period()
            activities = period_activities(self.activities(), period)
            label = label or period.label
        label = label or "Custom Selection"
        if not activities:
            raise EmptyReportError(label)
        summary = self._assistant.summarize(activities)
        return render_period_report(
            activities,
            label,
            summary,
            Path(output_dir),
            generated_at=self._clock.now(),
            company=self._config.company,
        )

    def build_submission_report(self, submission_id: UUID, output_dir: Path) -> RenderedReport:
        """Re-render the report for an earlier submission's snapshot."""
        submission = self.get_submission(submission_id)
        with LogContext.bind(submission_id=str(submission.id)):
            return self.build_report(
                output_dir,
                activities=submission.activities,
                label=(
                    f"{format_display_date(submission.period_start)}"
                    f" - {format_display_date(submission.period_end)}"
                ),
            )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _commit(self, state: TimesheetState) -> None:
        self._store.save(state)
        synced = self._backend.sync_activities(state.activities)
        if not synced:
            logger.warning("activity_sync_failed", extra={"activity_count": len(state.activities)})
