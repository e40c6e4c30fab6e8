"""ORM models. Importing this package registers every table on Base.metadata."""

from timelog_kernel.models.activity import ActivityRecord
from timelog_kernel.models.submission import SubmissionActivityRecord, SubmissionRecord

__all__ = [
    "ActivityRecord",
    "SubmissionActivityRecord",
    "SubmissionRecord",
]
