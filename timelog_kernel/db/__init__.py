"""Database layer - engine, base classes and column types."""

from timelog_kernel.db.base import UUID, Base, DecimalString, IsoDateTime, UUIDString
from timelog_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session",
    "init_engine_from_url",
    "session_scope",
    "create_tables",
    "Base",
    "UUIDString",
    "DecimalString",
    "IsoDateTime",
    "UUID",
]
