"""
Module: timelog_kernel.db.base
Responsibility: Declarative base class and portable column types for all
    SQLAlchemy ORM models.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, store/, domain/, or outer layers.

Invariants enforced:
    - UUID primary keys stored as String(36).
    - Hours are stored as exact decimal text, never as floats, so SQLite
      round-trips ``Decimal("0.25")`` unchanged.
    - Instants are stored as ISO-8601 text so the UTC offset survives on
      backends (SQLite) whose DateTime type drops tzinfo.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Guarantees:
        - process_bind_param: UUID -> str on INSERT/UPDATE.
        - process_result_value: str -> UUID on SELECT.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class DecimalString(TypeDecorator):
    """Decimal stored as its canonical string form."""

    impl = String(32)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(Decimal(value))
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return Decimal(value)
        return None


class IsoDateTime(TypeDecorator):
    """Timezone-preserving datetime stored as ISO-8601 text."""

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return value.isoformat()
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return datetime.fromisoformat(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is always a uuid4-generated UUID stored as String(36).
        - Decimal maps to DecimalString, datetime to IsoDateTime.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: DecimalString(),
        datetime: IsoDateTime(),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


# Re-export UUID for convenience
UUID = PyUUID
