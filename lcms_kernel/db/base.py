"""
Module: lcms_kernel.db.base
Responsibility: Declarative base class for all SQLAlchemy ORM models.  Provides
    the integer primary key convention and the type annotation map that keeps
    column types consistent across PostgreSQL and SQLite.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Integer primary keys assigned by the store (autoincrement).  Exported
      TSV files key rows by these ids, so they must stay stable.
    - UTC timestamps: every datetime column round-trips as a timezone-aware
      UTC value, including on SQLite which stores naive values.

Failure modes:
    - IntegrityError on duplicate primary keys (only possible when callers
      assign ids explicitly).
"""

from datetime import datetime, timezone
from typing import ClassVar

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
IdType = BigInteger().with_variant(Integer(), "sqlite")


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC datetime, portable across backends.

    Contract:
        Values are normalized to UTC on the way in and always come back
        with ``tzinfo=timezone.utc``.

    Guarantees:
        - process_bind_param: aware -> UTC; naive values are taken as UTC.
        - process_result_value: naive (SQLite) -> UTC-aware.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is a store-assigned integer primary key.
        - datetime maps to UTCDateTime -- always timezone-aware.
        - int maps to BigInteger (INTEGER on SQLite).
    """

    type_annotation_map: ClassVar[dict] = {
        datetime: UTCDateTime(),
        int: IdType,
    }

    id: Mapped[int] = mapped_column(
        IdType,
        primary_key=True,
        autoincrement=True,
    )
