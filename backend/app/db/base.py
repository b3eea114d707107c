"""
Declarative base, shared mixins and column types for all ORM models.
"""

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from app.core.clock import as_utc, utc_now


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp that is always UTC on both sides.

    PostgreSQL hands back TIMESTAMPTZ values in the session time zone and
    SQLite drops tzinfo entirely, so values are normalized on bind and on load.
    Comparisons against utc_now() are then safe on either backend.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return as_utc(value)


class TimestampMixin:
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=False, default=utc_now, onupdate=utc_now)
