"""
Timesheet Domain Values (``timelog_kernel.domain.values``).

Responsibility
--------------
Frozen dataclass value objects for the nouns of the time log: activity
categories, logged activities, period submissions and the whole timesheet
state that a store loads and saves.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Consumed by the
store implementations and ``TimesheetService``.

Invariants enforced
-------------------
* All values are ``frozen=True``; "mutation" returns a new value.
* Hours are ``Decimal`` -- NEVER ``float``.
* An activity is marked submitted at most once.
* A submission is a snapshot; it is never changed after capture except to
  attach the backend's remote id.

Failure modes
-------------
* ``InvalidActivityError`` for an empty task, an unknown category or
  non-positive hours.
* ``ActivityAlreadySubmittedError`` when re-marking a submitted activity.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from uuid import UUID, uuid4

from timelog_kernel.domain.payroll_period import PayrollPeriod
from timelog_kernel.exceptions import (
    ActivityAlreadySubmittedError,
    InvalidActivityError,
)
from timelog_kernel.logging_config import get_logger

logger = get_logger("domain.values")

ZERO_HOURS = Decimal("0")

# Free-text fields of the detailed report, in display order.
NARRATIVE_FIELDS = (
    "accomplishments",
    "positive_impact",
    "challenges",
    "overcoming_challenges",
    "future_plans",
    "achievement_strategy",
    "achievement_timeframe",
    "company_benefit",
)


class ActivityCategory(str, Enum):
    """The six fixed categories of work."""

    MAINTENANCE = "Maintenance"
    CUSTOMER_SERVICE = "Customer Service"
    LOCKSMITH = "Locksmith"
    TRANSPORT = "Transport"
    ADMIN = "Admin"
    OTHER = "Other"

    @classmethod
    def parse(cls, text: str | None) -> ActivityCategory | None:
        """Exact, whitespace-trimmed match on the display name; None otherwise."""
        if text is None:
            return None
        try:
            return cls(text.strip())
        except ValueError:
            return None


DEFAULT_CATEGORY = ActivityCategory.MAINTENANCE


class SubmissionStatus(str, Enum):
    """Submission states.  Every submission is created PENDING."""

    PENDING = "Pending"
    APPROVED = "Approved"
    PAID = "Paid"


def to_hours(value: Decimal | int | str) -> Decimal:
    """Coerce a user-supplied duration to a positive Decimal."""
    try:
        hours = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidActivityError("duration_hours", f"not a number: {value!r}") from None
    if not hours.is_finite() or hours <= ZERO_HOURS:
        raise InvalidActivityError("duration_hours", f"must be positive, got {value}")
    return hours


@dataclass(frozen=True)
class Activity:
    """A single logged piece of work."""
    id: UUID
    date: date
    category: ActivityCategory
    task: str
    duration_hours: Decimal
    description: str = ""
    accomplishments: str = ""
    positive_impact: str = ""
    challenges: str = ""
    overcoming_challenges: str = ""
    future_plans: str = ""
    achievement_strategy: str = ""
    achievement_timeframe: str = ""
    company_benefit: str = ""
    submitted: bool = False
    submission_id: UUID | None = None

    @classmethod
    def create(
        cls,
        task: str,
        duration_hours: Decimal | int | str,
        on: date,
        category: ActivityCategory = DEFAULT_CATEGORY,
        description: str = "",
        activity_id: UUID | None = None,
        **narrative: str,
    ) -> Activity:
        """Validate raw entry fields and build an unsubmitted activity."""
        task = (task or "").strip()
        if not task:
            raise InvalidActivityError("task", "task title is required")
        unknown = set(narrative) - set(NARRATIVE_FIELDS)
        if unknown:
            raise InvalidActivityError(
                "narrative", f"unknown fields: {', '.join(sorted(unknown))}"
            )
        try:
            category = ActivityCategory(category)
        except ValueError:
            raise InvalidActivityError("category", f"unknown category: {category!r}") from None
        if isinstance(on, datetime):
            on = on.date()

        activity = cls(
            id=activity_id or uuid4(),
            date=on,
            category=category,
            task=task,
            duration_hours=to_hours(duration_hours),
            description=description,
            **narrative,
        )
        logger.debug(
            "activity_created",
            extra={
                "activity_id": str(activity.id),
                "category": activity.category.value,
                "work_date": activity.date,
                "duration_hours": str(activity.duration_hours),
            },
        )
        return activity

    @property
    def narrative(self) -> dict[str, str]:
        """The non-empty detailed-report fields, in display order."""
        return {
            name: getattr(self, name)
            for name in NARRATIVE_FIELDS
            if getattr(self, name)
        }

    def with_description(self, description: str) -> Activity:
        if self.submitted:
            raise ActivityAlreadySubmittedError(str(self.id), _str_or_none(self.submission_id))
        return replace(self, description=description)

    def mark_submitted(self, submission_id: UUID) -> Activity:
        if self.submitted:
            raise ActivityAlreadySubmittedError(str(self.id), _str_or_none(self.submission_id))
        return replace(self, submitted=True, submission_id=submission_id)


def _str_or_none(value: UUID | None) -> str | None:
    return str(value) if value is not None else None


@dataclass(frozen=True)
class Submission:
    """Immutable snapshot of one period's submitted work."""
    id: UUID
    period_start: date
    period_end: date
    period_label: str
    submitted_at: datetime
    total_hours: Decimal
    activity_count: int
    activities: tuple[Activity, ...]
    status: SubmissionStatus = SubmissionStatus.PENDING
    remote_id: str | None = None

    @classmethod
    def capture(
        cls,
        period: PayrollPeriod,
        activities: Iterable[Activity],
        submitted_at: datetime,
        submission_id: UUID | None = None,
    ) -> Submission:
        captured = tuple(activities)
        return cls(
            id=submission_id or uuid4(),
            period_start=period.start,
            period_end=period.end,
            period_label=period.label,
            submitted_at=submitted_at,
            total_hours=total_hours(captured),
            activity_count=len(captured),
            activities=captured,
        )

    def with_remote_id(self, remote_id: str) -> Submission:
        return replace(self, remote_id=remote_id)

    def headline(self) -> str:
        """One-line summary shown in the submission history."""
        lead = self.activities[0].category.value if self.activities else "Operations"
        return (
            f"Professional period completed with {self.activity_count} recorded "
            f"tasks. Major contributions in {lead}."
        )


@dataclass(frozen=True)
class TimesheetState:
    """
    Everything the store persists.

    Both sequences are newest first.
    """
    activities: tuple[Activity, ...] = ()
    submissions: tuple[Submission, ...] = field(default_factory=tuple)

    def find_activity(self, activity_id: UUID) -> Activity | None:
        return next((a for a in self.activities if a.id == activity_id), None)

    def find_submission(self, submission_id: UUID) -> Submission | None:
        return next((s for s in self.submissions if s.id == submission_id), None)

    def add_activity(self, activity: Activity) -> TimesheetState:
        return replace(self, activities=(activity, *self.activities))

    def remove_activity(self, activity_id: UUID) -> TimesheetState:
        return replace(
            self,
            activities=tuple(a for a in self.activities if a.id != activity_id),
        )

    def replace_activity(self, activity: Activity) -> TimesheetState:
        return replace(
            self,
            activities=tuple(
                activity if a.id == activity.id else a for a in self.activities
            ),
        )

    def record_submission(self, submission: Submission) -> TimesheetState:
        """Prepend ``submission`` and mark every activity it captured."""
        captured = {a.id for a in submission.activities}
        return replace(
            self,
            activities=tuple(
                a.mark_submitted(submission.id) if a.id in captured else a
                for a in self.activities
            ),
            submissions=(submission, *self.submissions),
        )


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def total_hours(activities: Iterable[Activity]) -> Decimal:
    return sum((a.duration_hours for a in activities), ZERO_HOURS)


def hours_by_category(activities: Iterable[Activity]) -> dict[ActivityCategory, Decimal]:
    """Category -> hours, in first-seen order."""
    totals: dict[ActivityCategory, Decimal] = {}
    for a in activities:
        totals[a.category] = totals.get(a.category, ZERO_HOURS) + a.duration_hours
    return totals


def period_activities(
    activities: Iterable[Activity],
    period: PayrollPeriod,
) -> tuple[Activity, ...]:
    """Unsubmitted activities dated inside ``period``, order preserved."""
    return tuple(
        a for a in activities if not a.submitted and period.contains(a.date)
    )
