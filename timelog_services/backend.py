"""
timelog_services.backend -- Simulated payroll backend.

Responsibility:
    Stands in for the remote payroll system: accepts activity syncs and
    period submissions after a fixed latency, and reports company payroll
    settings.

Architecture position:
    Services -- external collaborator.  The wait is an injected ``sleep``
    callable so tests run instantly.

Invariants enforced:
    - ``submit_payroll`` always succeeds with a ``REM-<n>`` remote id,
      ``0 <= n < remote_id_max``.
    - ``last_synced`` holds the most recent activity snapshot.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from timelog_config.schema import BackendSettings, CompanySettings, ScheduleSettings
from timelog_kernel.domain.values import Activity, Submission
from timelog_kernel.logging_config import get_logger

logger = get_logger("services.backend")


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a payroll submission."""
    success: bool
    remote_id: str | None


@dataclass(frozen=True)
class PayrollCompanySettings:
    """What the backend reports about the company's payroll cycle."""
    submission_days: tuple[int, ...]
    payment_days: tuple[int, ...]
    company_name: str
    currency: str


class SimulatedPayrollBackend:
    """
    In-process payroll backend with artificial latency.

    Args:
        settings: Delays and remote id shape.
        company: Company identity reported by ``company_settings()``.
        schedule: Payroll days reported by ``company_settings()``.
        sleep: Blocking wait; ``time.sleep`` in production.
        rng: Source of remote id numbers.
    """

    def __init__(
        self,
        settings: BackendSettings | None = None,
        company: CompanySettings | None = None,
        schedule: ScheduleSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ):
        self._settings = settings or BackendSettings()
        self._company = company or CompanySettings()
        self._schedule = schedule or ScheduleSettings()
        self._sleep = sleep
        self._rng = rng or random.Random()
        self.last_synced: tuple[Activity, ...] = ()

    def sync_activities(self, activities: Iterable[Activity]) -> bool:
        self._sleep(float(self._settings.sync_delay_seconds))
        self.last_synced = tuple(activities)
        logger.info(
            "activities_synced",
            extra={"activity_count": len(self.last_synced)},
        )
        return True

    def submit_payroll(self, submission: Submission) -> SubmitResult:
        self._sleep(float(self._settings.submit_delay_seconds))
        remote_id = (
            f"{self._settings.remote_id_prefix}"
            f"{self._rng.randrange(self._settings.remote_id_max)}"
        )
        logger.info(
            "payroll_submitted",
            extra={
                "submission_id": str(submission.id),
                "remote_id": remote_id,
                "total_hours": submission.total_hours,
                "activity_count": submission.activity_count,
            },
        )
        return SubmitResult(success=True, remote_id=remote_id)

    def company_settings(self) -> PayrollCompanySettings:
        return PayrollCompanySettings(
            submission_days=self._schedule.submission_days,
            payment_days=self._schedule.payment_days,
            company_name=self._company.name,
            currency=self._company.currency,
        )
