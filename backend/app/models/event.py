"""
Event model with capacity tracking.

Key design decisions:
- Registrations are counted, not denormalized into a seats column
- `version` is bumped on every admitted registration so concurrent
  admissions for the same event can detect each other (optimistic locking)
- Composite index on (date_time, location) matches the upcoming-events ordering
"""

from sqlalchemy import Column, Integer, String, Index, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin, UTCDateTime


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    date_time = Column(UTCDateTime, nullable=False)
    location = Column(String(255), nullable=False)
    capacity = Column(Integer, nullable=False)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    registrations = relationship(
        "Registration",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("capacity >= 1 AND capacity <= 1000", name="check_event_capacity_range"),
        Index("ix_events_date_time", "date_time"),
        Index("ix_events_date_time_location", "date_time", "location"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, capacity={self.capacity})>"
