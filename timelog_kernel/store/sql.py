"""
SqlTimesheetStore -- SQLAlchemy-backed TimesheetStore.

Responsibility:
    Maps ``TimesheetState`` onto the ``activities``, ``submissions`` and
    ``submission_activities`` tables.

Invariants enforced:
    - ``save()`` runs in a single transaction (``session_scope``): the old
      rows are deleted and the new state inserted, or nothing changes.
    - ``position`` columns encode newest-first order.

Failure modes:
    - StoreNotInitializedError when no session factory is supplied and the
      module-level engine was never initialized.
    - SQLAlchemy errors propagate after rollback.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload, sessionmaker

from timelog_kernel.db.engine import get_session_factory, session_scope
from timelog_kernel.domain.values import TimesheetState
from timelog_kernel.logging_config import get_logger
from timelog_kernel.models.activity import ActivityRecord
from timelog_kernel.models.submission import SubmissionActivityRecord, SubmissionRecord
from timelog_kernel.store.base import TimesheetStore

logger = get_logger("store.sql")


class SqlTimesheetStore(TimesheetStore):
    """
    Store backed by a relational database.

    Args:
        session_factory: Factory to open sessions with.  Defaults to the
            module-level factory from ``init_engine_from_url()``.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def _factory(self) -> sessionmaker[Session]:
        return self._session_factory or get_session_factory()

    def load(self) -> TimesheetState:
        with session_scope(self._factory()) as session:
            activities = session.scalars(
                select(ActivityRecord).order_by(ActivityRecord.position)
            ).all()
            submissions = session.scalars(
                select(SubmissionRecord)
                .options(selectinload(SubmissionRecord.activities))
                .order_by(SubmissionRecord.position)
            ).all()
            state = TimesheetState(
                activities=tuple(row.to_value() for row in activities),
                submissions=tuple(row.to_value() for row in submissions),
            )

        logger.debug(
            "state_loaded",
            extra={
                "activity_count": len(state.activities),
                "submission_count": len(state.submissions),
            },
        )
        return state

    def save(self, state: TimesheetState) -> None:
        with session_scope(self._factory()) as session:
            session.execute(delete(SubmissionActivityRecord))
            session.execute(delete(SubmissionRecord))
            session.execute(delete(ActivityRecord))
            session.add_all(
                ActivityRecord.from_value(activity, position)
                for position, activity in enumerate(state.activities)
            )
            session.add_all(
                SubmissionRecord.from_value(submission, position)
                for position, submission in enumerate(state.submissions)
            )

        logger.info(
            "state_saved",
            extra={
                "activity_count": len(state.activities),
                "submission_count": len(state.submissions),
            },
        )
