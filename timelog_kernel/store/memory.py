"""In-memory TimesheetStore for tests and dry runs."""

from timelog_kernel.domain.values import TimesheetState
from timelog_kernel.logging_config import get_logger
from timelog_kernel.store.base import TimesheetStore

logger = get_logger("store.memory")


class InMemoryTimesheetStore(TimesheetStore):
    """
    Keeps the last saved state in an attribute.

    The state is frozen, so no copying is needed to isolate callers.
    """

    def __init__(self, initial: TimesheetState | None = None):
        self._state = initial or TimesheetState()
        self.save_count = 0

    def load(self) -> TimesheetState:
        return self._state

    def save(self, state: TimesheetState) -> None:
        self._state = state
        self.save_count += 1
        logger.debug(
            "state_saved",
            extra={
                "activity_count": len(state.activities),
                "submission_count": len(state.submissions),
            },
        )
