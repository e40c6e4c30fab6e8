"""
Payroll period resolution (``timelog_kernel.domain.payroll_period``).

Responsibility
--------------
Maps a calendar date to the bi-monthly billing window that contains it:
the window boundaries, the submission deadline, the payment date and a
display label.  Also hosts the small date helpers that the dashboard and
report render with.

Architecture position
---------------------
**Kernel > Domain** -- pure functional core.  ZERO I/O.  The only source of
"now" is an injected ``Clock``.

Invariants enforced
-------------------
* Every day of every month belongs to exactly one period: days 1-14, or
  day 15 through the last calendar day.
* First half: deadline 14th 23:59:59, paid on the 15th.
* Second half: deadline "the 29th" 23:59:59, paid on ``min(last day, 30)``.
* All arithmetic is on the local calendar of the reference value.
* The deadline is 23:59:59 wall-clock time on its own date, across DST
  changes.

Failure modes
-------------
* ``TypeError`` when the reference is not a ``date``/``datetime``.

Known anomaly
-------------
The second-half deadline is a fixed day-of-month.  In a 28-day February
"the 29th" overflows to 1 March 23:59:59, after the period's own end.
This is the established behaviour and is kept as is.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum

from timelog_kernel.domain.clock import Clock, SystemClock

FIRST_HALF_LAST_DAY = 14
FIRST_HALF_PAYMENT_DAY = 15
SECOND_HALF_DEADLINE_DAY = 29
SECOND_HALF_PAYMENT_CAP = 30

DEADLINE_TIME = time(23, 59, 59)
DEFAULT_WARNING_WINDOW = timedelta(hours=48)
DEFAULT_SUBMISSION_DAYS = (FIRST_HALF_LAST_DAY, SECOND_HALF_DEADLINE_DAY)


class PeriodHalf(Enum):
    """Which half of the month a period covers."""
    FIRST = "H1"
    SECOND = "H2"


@dataclass(frozen=True)
class PayrollPeriod:
    """
    A bi-monthly billing window.

    ``start`` and ``end`` are inclusive.  ``deadline`` is 23:59:59 on the
    reference's wall clock: naive for dates and naive datetimes, in the
    reference's zone otherwise.  A reference carrying the local offset (as
    ``SystemClock`` returns) gets the local offset of the deadline date, so
    a DST change in between moves the offset, not the wall-clock time.
    """
    start: date
    end: date
    deadline: datetime
    payment_date: date
    label: str

    @property
    def half(self) -> PeriodHalf:
        if self.start.day == 1:
            return PeriodHalf.FIRST
        return PeriodHalf.SECOND

    @property
    def period_code(self) -> str:
        """Stable identifier, e.g. ``2024-02-H1``."""
        return f"{self.start:%Y-%m}-{self.half.value}"

    def contains(self, day: date) -> bool:
        """Inclusive range test on calendar days."""
        if isinstance(day, datetime):
            day = day.date()
        return self.start <= day <= self.end


def _is_local_offset(reference: datetime) -> bool:
    """True when ``reference`` carries the fixed local offset ``astimezone()`` gives."""
    return (
        isinstance(reference.tzinfo, timezone)
        and reference.utcoffset() == reference.astimezone().utcoffset()
    )


def _end_of_day(year: int, month: int, day_of_month: int, reference: date) -> datetime:
    # Counts forward from the 1st so an out-of-range day rolls into the next month.
    first = datetime.combine(date(year, month, 1), DEADLINE_TIME)
    deadline = first + timedelta(days=day_of_month - 1)
    if not isinstance(reference, datetime) or reference.tzinfo is None:
        return deadline
    if _is_local_offset(reference):
        # Local wall clock: the offset in force on the deadline date applies.
        return deadline.astimezone()
    return deadline.replace(tzinfo=reference.tzinfo)


def resolve_payroll_period(
    reference: date | None = None,
    *,
    clock: Clock | None = None,
) -> PayrollPeriod:
    """Return the payroll period containing ``reference``.

    Args:
        reference: A ``date`` or ``datetime``.  Defaults to the clock's now.
        clock: Source of "now" when ``reference`` is omitted.

    Raises:
        TypeError: if ``reference`` is not a date or datetime.
    """
    if reference is None:
        reference = (clock or SystemClock()).now()
    if not isinstance(reference, date):
        raise TypeError(
            f"reference must be a date or datetime, got {type(reference).__name__}"
        )

    year, month, day = reference.year, reference.month, reference.day
    month_name = calendar.month_name[month]

    if day <= FIRST_HALF_LAST_DAY:
        return PayrollPeriod(
            start=date(year, month, 1),
            end=date(year, month, FIRST_HALF_LAST_DAY),
            deadline=_end_of_day(year, month, FIRST_HALF_LAST_DAY, reference),
            payment_date=date(year, month, FIRST_HALF_PAYMENT_DAY),
            label=f"First Half of {month_name}",
        )

    last_day = calendar.monthrange(year, month)[1]
    return PayrollPeriod(
        start=date(year, month, FIRST_HALF_LAST_DAY + 1),
        end=date(year, month, last_day),
        deadline=_end_of_day(year, month, SECOND_HALF_DEADLINE_DAY, reference),
        payment_date=date(year, month, min(last_day, SECOND_HALF_PAYMENT_CAP)),
        label=f"Second Half of {month_name}",
    )


def _align(deadline: datetime, now: datetime) -> tuple[datetime, datetime]:
    """Make both values naive-local or both aware so they can be compared."""
    if (deadline.tzinfo is None) == (now.tzinfo is None):
        return deadline, now
    if deadline.tzinfo is None:
        return deadline, now.astimezone().replace(tzinfo=None)
    return deadline, now.astimezone()


def is_deadline_approaching(
    deadline: datetime,
    now: datetime | None = None,
    *,
    window: timedelta = DEFAULT_WARNING_WINDOW,
    clock: Clock | None = None,
) -> bool:
    """True iff ``deadline`` is in the future and less than ``window`` away."""
    if now is None:
        now = (clock or SystemClock()).now()
    deadline, now = _align(deadline, now)
    remaining = deadline - now
    return timedelta(0) < remaining < window


def is_submission_day(
    day: date,
    submission_days: tuple[int, ...] = DEFAULT_SUBMISSION_DAYS,
) -> bool:
    """True when ``day`` falls on one of the configured submission days."""
    return day.day in submission_days


def format_display_date(value: date | str) -> str:
    """Render a date the way the reports do: ``Feb 3, 2024``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return f"{calendar.month_abbr[value.month]} {value.day}, {value.year}"
