"""Persistence behind the TimesheetStore interface."""

from timelog_kernel.store.base import TimesheetStore
from timelog_kernel.store.memory import InMemoryTimesheetStore
from timelog_kernel.store.sql import SqlTimesheetStore

__all__ = [
    "InMemoryTimesheetStore",
    "SqlTimesheetStore",
    "TimesheetStore",
]
