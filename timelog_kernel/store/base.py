"""
TimesheetStore -- the persistence seam of the time log.

Responsibility:
    Loads and saves the whole ``TimesheetState`` so the storage medium
    (database, memory, a remote API) can change without touching the
    service layer.

Architecture position:
    Kernel > Store -- imperative shell.  Implementations may do I/O; the
    interface deals only in frozen domain values.

Invariants enforced:
    - ``save()`` replaces the persisted state atomically: after it returns,
      ``load()`` yields a state equal to the one saved.
    - Activity and submission order (newest first) survives a round trip.
"""

from abc import ABC, abstractmethod

from timelog_kernel.domain.values import TimesheetState


class TimesheetStore(ABC):
    """Abstract load/save interface for the timesheet state."""

    @abstractmethod
    def load(self) -> TimesheetState:
        """Return the persisted state (empty when nothing was saved)."""
        ...

    @abstractmethod
    def save(self, state: TimesheetState) -> None:
        """Persist ``state``, replacing whatever was stored before."""
        ...
