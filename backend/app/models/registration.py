"""
Registration model: one row per user registered for an event.

Key design decisions:
- Unique constraint on (event_id, user_id) is the storage-level guard against
  duplicate registrations racing past the service's duplicate check
- user_id is deliberately not a foreign key; users are provisioned elsewhere
- Cancellation deletes the row, there is no status column
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.clock import utc_now
from app.db.base import Base, UTCDateTime


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)

    event = relationship("Event", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_registration_event_user"),
    )

    def __repr__(self) -> str:
        return f"<Registration(event={self.event_id}, user={self.user_id})>"
