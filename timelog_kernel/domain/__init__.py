"""
Pure domain layer.

Payroll period resolution and the timesheet value objects, with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Wall-clock time (a Clock is injected)
- Network

All domain objects are immutable and deterministic.
"""

from timelog_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from timelog_kernel.domain.payroll_period import (
    PayrollPeriod,
    PeriodHalf,
    format_display_date,
    is_deadline_approaching,
    is_submission_day,
    resolve_payroll_period,
)
from timelog_kernel.domain.values import (
    DEFAULT_CATEGORY,
    NARRATIVE_FIELDS,
    Activity,
    ActivityCategory,
    Submission,
    SubmissionStatus,
    TimesheetState,
    hours_by_category,
    period_activities,
    total_hours,
)

__all__ = [
    "Activity",
    "ActivityCategory",
    "Clock",
    "DEFAULT_CATEGORY",
    "DeterministicClock",
    "NARRATIVE_FIELDS",
    "PayrollPeriod",
    "PeriodHalf",
    "Submission",
    "SubmissionStatus",
    "SystemClock",
    "TimesheetState",
    "format_display_date",
    "hours_by_category",
    "is_deadline_approaching",
    "is_submission_day",
    "period_activities",
    "resolve_payroll_period",
    "total_hours",
]
