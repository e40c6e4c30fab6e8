"""
Module: timelog_kernel.models.activity
Responsibility: ORM persistence for logged activities.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/values.py only.

Invariants enforced:
    - ``position`` preserves the log's newest-first order across reloads.
    - Rows convert to and from the frozen ``Activity`` value; the ORM
      entity never leaves the store.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from timelog_kernel.db.base import Base, UUIDString
from timelog_kernel.domain.values import NARRATIVE_FIELDS, Activity, ActivityCategory


class ActivityColumns:
    """Columns shared by live activities and submission snapshots."""

    activity_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    task: Mapped[str] = mapped_column(String(200), nullable=False)
    duration_hours: Mapped[Decimal] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    accomplishments: Mapped[str] = mapped_column(Text, default="", nullable=False)
    positive_impact: Mapped[str] = mapped_column(Text, default="", nullable=False)
    challenges: Mapped[str] = mapped_column(Text, default="", nullable=False)
    overcoming_challenges: Mapped[str] = mapped_column(Text, default="", nullable=False)
    future_plans: Mapped[str] = mapped_column(Text, default="", nullable=False)
    achievement_strategy: Mapped[str] = mapped_column(Text, default="", nullable=False)
    achievement_timeframe: Mapped[str] = mapped_column(Text, default="", nullable=False)
    company_benefit: Mapped[str] = mapped_column(Text, default="", nullable=False)
    submitted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    submission_ref: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    @classmethod
    def from_value(cls, activity: Activity, position: int, **extra):
        return cls(
            activity_id=activity.id,
            work_date=activity.date,
            category=activity.category.value,
            task=activity.task,
            duration_hours=activity.duration_hours,
            description=activity.description,
            submitted=activity.submitted,
            submission_ref=activity.submission_id,
            position=position,
            **{name: getattr(activity, name) for name in NARRATIVE_FIELDS},
            **extra,
        )

    def to_value(self) -> Activity:
        return Activity(
            id=self.activity_id,
            date=self.work_date,
            category=ActivityCategory(self.category),
            task=self.task,
            duration_hours=self.duration_hours,
            description=self.description,
            submitted=self.submitted,
            submission_id=self.submission_ref,
            **{name: getattr(self, name) for name in NARRATIVE_FIELDS},
        )


class ActivityRecord(ActivityColumns, Base):
    """A row of the live activity log."""

    __tablename__ = "activities"

    __table_args__ = (
        UniqueConstraint("activity_id", name="uq_activity_id"),
        Index("idx_activity_work_date", "work_date"),
        Index("idx_activity_position", "position"),
    )

    def __repr__(self) -> str:
        return f"<ActivityRecord {self.activity_id}: {self.task}>"
