"""
Timelog configuration schema.

Frozen dataclasses that the loader parses YAML into.  Every field has a
default equal to the shipped ``sets/default.yaml`` so a partial file only
needs to name what it overrides.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompanySettings:
    """Who the reports are issued for."""

    name: str = "Wheels & Keys Inc."
    short_name: str = "Wheels & Keys"
    currency: str = "USD"
    report_title: str = "STAFF PERFORMANCE & ACTIVITY REPORT"
    report_file_prefix: str = "WK_Report"


# ---------------------------------------------------------------------------
# Payroll schedule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScheduleSettings:
    """Submission and payment days of the bi-monthly cycle."""

    submission_days: tuple[int, ...] = (14, 29)
    payment_days: tuple[int, ...] = (15, 30)
    deadline_warning_hours: int = 48


# ---------------------------------------------------------------------------
# Text assistant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AssistantSettings:
    """Generative text service used for polish, classification and summaries."""

    enabled: bool = True
    model: str = "gemini-3-flash-preview"
    api_key_env: str = "API_KEY"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_seconds: float = 30.0
    enhance_temperature: Decimal = Decimal("0.7")
    enhance_max_tokens: int = 150
    enhance_thinking_budget: int = 50
    classify_temperature: Decimal = Decimal("0.1")
    classify_max_tokens: int = 20


# ---------------------------------------------------------------------------
# Simulated backend
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BackendSettings:
    """Latency and id shape of the simulated payroll backend."""

    sync_delay_seconds: Decimal = Decimal("0.8")
    submit_delay_seconds: Decimal = Decimal("2.0")
    remote_id_prefix: str = "REM-"
    remote_id_max: int = 100000


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StorageSettings:
    database_url: str = "sqlite:///timelog.db"


@dataclass(frozen=True)
class TimelogConfig:
    """The complete, validated runtime configuration."""

    config_id: str = "default"
    company: CompanySettings = field(default_factory=CompanySettings)
    schedule: ScheduleSettings = field(default_factory=ScheduleSettings)
    assistant: AssistantSettings = field(default_factory=AssistantSettings)
    backend: BackendSettings = field(default_factory=BackendSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)
    checksum: str = ""
