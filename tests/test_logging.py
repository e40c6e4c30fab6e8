"""Tests for the structured logging system (timelog_kernel/logging_config.py)."""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from timelog_kernel.domain.values import ActivityCategory
from timelog_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests, then restore the suite's setup."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


def _parse_all_logs(stream: StringIO) -> list[dict]:
    """Parse all JSON log lines from a stream."""
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("hello")

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "timelog_kernel.test"
        assert "ts" in record

    def test_extra_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("activity_logged", extra={"position": 3, "category": "Admin"})

        record = _parse_log(stream)
        assert record["position"] == 3
        assert record["category"] == "Admin"

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        LogContext.set(correlation_id="abc-123", period_code="2024-02-H1")
        logger.info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "abc-123"
        assert record["period_code"] == "2024-02-H1"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        try:
            raise ValueError("boom")
        except ValueError:
            logger.error("failed", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_type"] == "ValueError"
        assert record["exc_message"] == "boom"
        assert "traceback" in record

    def test_timelog_exception_code_extracted(self):
        """Timelog exceptions carry a .code attribute and structured fields."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        from timelog_kernel.exceptions import EmptySubmissionError

        try:
            raise EmptySubmissionError("First Half of May")
        except EmptySubmissionError:
            logger.error("submission_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "EMPTY_SUBMISSION"
        assert record["exc_type"] == "EmptySubmissionError"
        assert record["exc_period_label"] == "First Half of May"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "activity_id" not in record

    def test_domain_types_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        uid = uuid4()
        logger.info(
            "with_types",
            extra={
                "entry_id": uid,
                "work_date": date(2024, 2, 3),
                "hours": Decimal("1.25"),
                "kind": ActivityCategory.LOCKSMITH,
            },
        )

        record = _parse_log(stream)
        assert record["entry_id"] == str(uid)
        assert record["work_date"] == "2024-02-03"
        assert record["hours"] == "1.25"
        assert record["kind"] == "Locksmith"

    def test_valid_json_every_line(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        logger = get_logger("test")
        logger.info("first")
        logger.warning("second", extra={"k": "v"})
        logger.debug("third")

        logs = _parse_all_logs(stream)
        # default level is INFO, so the debug line is dropped
        assert len(logs) == 2
        for record in logs:
            assert "ts" in record
            assert "level" in record
            assert "logger" in record
            assert "message" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    """Tests for context propagation."""

    def test_set_and_get(self):
        LogContext.set(correlation_id="x", activity_id="y")
        ctx = LogContext.get_all()
        assert ctx == {"correlation_id": "x", "activity_id": "y"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()
        assert LogContext.get_all() == {}

    def test_bind_context_manager(self):
        LogContext.set(submission_id="outer")
        with LogContext.bind(submission_id="inner"):
            assert LogContext.get_all()["submission_id"] == "inner"
        assert LogContext.get_all()["submission_id"] == "outer"

    def test_bind_restores_none(self):
        """bind() restores to None if there was no previous value."""
        assert "period_code" not in LogContext.get_all()
        with LogContext.bind(period_code="2024-02-H2"):
            assert LogContext.get_all()["period_code"] == "2024-02-H2"
        assert "period_code" not in LogContext.get_all()

    def test_bind_restores_after_exception(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(activity_id="a-1"):
                raise RuntimeError("boom")
        assert LogContext.get_all() == {}

    def test_all_fields(self):
        LogContext.set(
            correlation_id="c",
            actor_id="a",
            activity_id="t",
            submission_id="s",
            period_code="p",
        )
        ctx = LogContext.get_all()
        assert len(ctx) == 5
        assert ctx["actor_id"] == "a"
        assert ctx["period_code"] == "p"


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_idempotent(self):
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        h2, _ = _make_handler()
        configure_logging(handler=h2)  # second call is no-op
        root = logging.getLogger("timelog_kernel")
        assert h1 in root.handlers
        assert h2 not in root.handlers

    def test_get_logger_returns_child(self):
        logger = get_logger("services.timesheet")
        assert logger.name == "timelog_kernel.services.timesheet"

    def test_logger_hierarchy(self):
        """Child loggers inherit the timelog_kernel root config."""
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        child = get_logger("deep.nested.module")
        child.debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "timelog_kernel.deep.nested.module"
