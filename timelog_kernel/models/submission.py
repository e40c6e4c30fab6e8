"""
Module: timelog_kernel.models.submission
Responsibility: ORM persistence for period submissions and the activity
    snapshot each one captured.
Architecture position: Kernel > Models.  May import from db/base.py,
    models/activity.py and domain/values.py only.

Invariants enforced:
    - Snapshot rows are copies; deleting or re-marking a live activity
      never changes a stored submission.
    - Deleting a submission cascades to its snapshot rows.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timelog_kernel.db.base import Base, UUIDString
from timelog_kernel.domain.values import Submission, SubmissionStatus
from timelog_kernel.models.activity import ActivityColumns


class SubmissionRecord(Base):
    """A submitted payroll period."""

    __tablename__ = "submissions"

    __table_args__ = (
        Index("idx_submission_position", "position"),
    )

    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    period_label: Mapped[str] = mapped_column(String(100), nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(nullable=False)
    total_hours: Mapped[Decimal] = mapped_column(nullable=False)
    activity_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=SubmissionStatus.PENDING.value, nullable=False
    )
    remote_id: Mapped[str | None] = mapped_column(String(40), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    activities: Mapped[list["SubmissionActivityRecord"]] = relationship(
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionActivityRecord.position",
    )

    def __repr__(self) -> str:
        return f"<SubmissionRecord {self.id}: {self.period_label} ({self.status})>"

    @classmethod
    def from_value(cls, submission: Submission, position: int) -> "SubmissionRecord":
        record = cls(
            id=submission.id,
            period_start=submission.period_start,
            period_end=submission.period_end,
            period_label=submission.period_label,
            submitted_at=submission.submitted_at,
            total_hours=submission.total_hours,
            activity_count=submission.activity_count,
            status=submission.status.value,
            remote_id=submission.remote_id,
            position=position,
        )
        record.activities = [
            SubmissionActivityRecord.from_value(activity, index)
            for index, activity in enumerate(submission.activities)
        ]
        return record

    def to_value(self) -> Submission:
        return Submission(
            id=self.id,
            period_start=self.period_start,
            period_end=self.period_end,
            period_label=self.period_label,
            submitted_at=self.submitted_at,
            total_hours=self.total_hours,
            activity_count=self.activity_count,
            activities=tuple(row.to_value() for row in self.activities),
            status=SubmissionStatus(self.status),
            remote_id=self.remote_id,
        )


class SubmissionActivityRecord(ActivityColumns, Base):
    """An activity as it stood when its period was submitted."""

    __tablename__ = "submission_activities"

    submission_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False,
    )

    submission: Mapped[SubmissionRecord] = relationship(back_populates="activities")
