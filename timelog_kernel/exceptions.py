"""
Typed Exception Hierarchy for the Timelog Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the CLI, tests, any future API) must react to failures by type,
never by parsing message text.  Every exception therefore:
  1. Has its own class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example - WRONG way to handle errors:
    try:
        service.delete_activity(activity_id)
    except Exception as e:
        if "submitted" in str(e):  # FRAGILE
            ...

Example - RIGHT way:
    try:
        service.delete_activity(activity_id)
    except ActivityAlreadySubmittedError as e:
        print(f"{e.activity_id} belongs to submission {e.submission_id}")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    TimelogError (base)
    |
    +-- ActivityError
    |   +-- ActivityNotFoundError
    |   +-- InvalidActivityError
    |   +-- ActivityAlreadySubmittedError
    |
    +-- SubmissionError
    |   +-- EmptySubmissionError
    |   +-- SubmissionNotFoundError
    |   +-- SubmissionRejectedError
    |
    +-- StoreError
    |   +-- StoreNotInitializedError
    |
    +-- ConfigError
    |   +-- InvalidConfigError
    |
    +-- ReportError
        +-- EmptyReportError

The text assistant never raises: it falls back to the caller's original
input, so it has no branch here.

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                        | When Raised
------------|-----------------------------|-----------------------------------
Activity    | ACTIVITY_NOT_FOUND          | Activity ID doesn't exist
            | INVALID_ACTIVITY            | Empty task, non-positive hours
            | ACTIVITY_ALREADY_SUBMITTED  | Delete/edit of a submitted entry
------------|-----------------------------|-----------------------------------
Submission  | EMPTY_SUBMISSION            | Nothing unsubmitted in the period
            | SUBMISSION_NOT_FOUND        | Submission ID doesn't exist
            | SUBMISSION_REJECTED         | Backend reported failure
------------|-----------------------------|-----------------------------------
Store       | STORE_NOT_INITIALIZED       | Engine/session factory missing
------------|-----------------------------|-----------------------------------
Config      | INVALID_CONFIG              | YAML value fails validation
------------|-----------------------------|-----------------------------------
Report      | EMPTY_REPORT                | No activities to render
"""


class TimelogError(Exception):
    """
    Base exception for all timelog errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "TIMELOG_ERROR"


# Activity-related exceptions


class ActivityError(TimelogError):
    """Base exception for activity-related errors."""

    code: str = "ACTIVITY_ERROR"


class ActivityNotFoundError(ActivityError):
    """Activity with given ID was not found."""

    code: str = "ACTIVITY_NOT_FOUND"

    def __init__(self, activity_id: str):
        self.activity_id = activity_id
        super().__init__(f"Activity not found: {activity_id}")


class InvalidActivityError(ActivityError):
    """Activity fields failed validation."""

    code: str = "INVALID_ACTIVITY"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid activity {field}: {reason}")


class ActivityAlreadySubmittedError(ActivityError):
    """
    Activity has been folded into a submission.

    Submitted activities are frozen: they can be neither deleted nor
    re-submitted.
    """

    code: str = "ACTIVITY_ALREADY_SUBMITTED"

    def __init__(self, activity_id: str, submission_id: str | None):
        self.activity_id = activity_id
        self.submission_id = submission_id
        super().__init__(
            f"Activity {activity_id} is already submitted "
            f"(submission {submission_id})"
        )


# Submission-related exceptions


class SubmissionError(TimelogError):
    """Base exception for submission errors."""

    code: str = "SUBMISSION_ERROR"


class EmptySubmissionError(SubmissionError):
    """The period has no unsubmitted activities to submit."""

    code: str = "EMPTY_SUBMISSION"

    def __init__(self, period_label: str):
        self.period_label = period_label
        super().__init__(f"No unsubmitted activities in {period_label}")


class SubmissionNotFoundError(SubmissionError):
    """Submission with given ID was not found."""

    code: str = "SUBMISSION_NOT_FOUND"

    def __init__(self, submission_id: str):
        self.submission_id = submission_id
        super().__init__(f"Submission not found: {submission_id}")


class SubmissionRejectedError(SubmissionError):
    """The payroll backend did not accept the submission."""

    code: str = "SUBMISSION_REJECTED"

    def __init__(self, submission_id: str, remote_id: str | None = None):
        self.submission_id = submission_id
        self.remote_id = remote_id
        super().__init__(f"Payroll backend rejected submission {submission_id}")


# Store exceptions


class StoreError(TimelogError):
    """Base exception for persistence errors."""

    code: str = "STORE_ERROR"


class StoreNotInitializedError(StoreError):
    """Database engine has not been initialized."""

    code: str = "STORE_NOT_INITIALIZED"

    def __init__(self):
        super().__init__("Engine not initialized. Call init_engine_from_url() first.")


# Configuration exceptions


class ConfigError(TimelogError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidConfigError(ConfigError):
    """A configuration value failed validation."""

    code: str = "INVALID_CONFIG"

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config {key}={value!r}: {reason}")


# Report exceptions


class ReportError(TimelogError):
    """Base exception for report generation errors."""

    code: str = "REPORT_ERROR"


class EmptyReportError(ReportError):
    """Report requested with no activities."""

    code: str = "EMPTY_REPORT"

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"No activities to report for {label}")
