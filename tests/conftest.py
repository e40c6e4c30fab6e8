"""
Pytest fixtures for the timelog test suite.

Provides:
- Structured logging configured once per session, LogContext reset per test
- Deterministic clocks
- In-memory and SQLite-backed timesheet stores
- Scriptable assistant and backend fakes
- A fully wired TimesheetService
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from timelog_config.schema import BackendSettings, TimelogConfig
from timelog_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from timelog_kernel.domain.clock import DeterministicClock
from timelog_kernel.domain.values import ActivityCategory
from timelog_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from timelog_kernel.store.memory import InMemoryTimesheetStore
from timelog_kernel.store.sql import SqlTimesheetStore
from timelog_services.assistant import TextAssistant
from timelog_services.backend import SimulatedPayrollBackend
from timelog_services.timesheet_service import TimesheetService

# Wednesday inside the first half of February 2024
FIXED_NOW = datetime(2024, 2, 7, 10, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture timelog_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.log_activity("Fix lock", hours=1)
            logs = captured_logs()
            assert any(r["message"] == "activity_logged" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("timelog_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock, store, collaborators
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(FIXED_NOW)


@pytest.fixture
def memory_store() -> InMemoryTimesheetStore:
    return InMemoryTimesheetStore()


@pytest.fixture
def sql_session_factory():
    """Fresh in-memory SQLite database per test."""
    init_engine_from_url("sqlite://", echo=False)
    create_tables()
    yield get_session_factory()
    drop_tables()
    reset_engine()


@pytest.fixture
def sql_store(sql_session_factory) -> SqlTimesheetStore:
    return SqlTimesheetStore(sql_session_factory)


class FakeAssistant(TextAssistant):
    """Scriptable assistant that records every call."""

    def __init__(self):
        self.enhanced_text: str | None = None
        self.category = ActivityCategory.LOCKSMITH
        self.summary = "A productive fortnight."
        self.calls: list[tuple[str, tuple]] = []

    def enhance(self, task, draft):
        self.calls.append(("enhance", (task, draft)))
        return self.enhanced_text if self.enhanced_text is not None else draft

    def classify(self, task):
        self.calls.append(("classify", (task,)))
        return self.category

    def summarize(self, activities):
        activities = tuple(activities)
        self.calls.append(("summarize", (activities,)))
        return self.summary


@pytest.fixture
def fake_assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def backend(sleeps) -> SimulatedPayrollBackend:
    return SimulatedPayrollBackend(BackendSettings(), sleep=sleeps.append)


@pytest.fixture
def config() -> TimelogConfig:
    return TimelogConfig()


@pytest.fixture
def service(memory_store, fake_assistant, backend, clock, config) -> TimesheetService:
    return TimesheetService(memory_store, fake_assistant, backend, clock, config)
