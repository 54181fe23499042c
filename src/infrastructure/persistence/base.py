"""Base model and column types for all database tables.

This module provides:
- BaseModel: Declarative base for ALL models
- UTCDateTime: Timezone-aware datetime column that round-trips as UTC on
  every backend (SQLite drops tzinfo on read)

Following hexagonal architecture:
- This is an infrastructure concern (database implementation detail)
- Domain entities should NOT inherit from this
- Domain entities are mapped to/from database models by repositories

Usage:
    class RequestTraceModel(BaseModel):
        __tablename__ = "request_traces"
        timestamp: Mapped[datetime] = mapped_column(UTCDateTime, index=True)
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator[datetime]):
    """Datetime column stored as UTC and always returned timezone-aware.

    Naive values passed in are assumed to already be UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(UTC)
        if dialect.name == "sqlite":
            # SQLite compares timestamps as text; keep one canonical format.
            return value.replace(tzinfo=None)
        return value

    def process_result_value(
        self, value: datetime | None, dialect: Dialect
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class BaseModel(DeclarativeBase):
    """Base class for all database models.

    Tables in this service use different primary keys (UUID trace id,
    autoincrement alert id, string counter key), so none is declared here.

    This is an infrastructure concern - domain entities should not
    inherit from or depend on this class.
    """

    __abstract__ = True

    def __repr__(self) -> str:
        """String representation showing the primary key."""
        mapper = self.__mapper__
        pk = ", ".join(
            f"{column.key}={getattr(self, column.key)!r}"
            for column in mapper.primary_key
        )
        return f"<{self.__class__.__name__}({pk})>"

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary (for debugging/logging)."""
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
        }
