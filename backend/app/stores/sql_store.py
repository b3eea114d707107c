"""
SQLAlchemy implementations of the store interfaces.

Both stores share the request's AsyncSession, so everything a service does
within one request lands in one transaction.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AlreadyRegisteredError
from app.models.event import Event
from app.models.registration import Registration
from app.models.user import User
from app.schemas.event import RegisteredUser
from app.stores.interfaces import EventStore, RegistrationStore


class _SessionStore:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        # Also expires the identity map, so the next get_event re-reads the row
        await self._db.rollback()


class SqlEventStore(_SessionStore, EventStore):
    async def add_event(self, title: str, date_time: datetime, location: str, capacity: int) -> Event:
        event = Event(title=title, date_time=date_time, location=location, capacity=capacity)
        self._db.add(event)
        await self._db.flush()
        await self._db.refresh(event)
        return event

    async def get_event(self, event_id: int) -> Optional[Event]:
        result = await self._db.execute(select(Event).where(Event.id == event_id))
        return result.scalar_one_or_none()

    async def list_upcoming(self, now: datetime) -> list[Event]:
        # Served by the ix_events_date_time_location index
        result = await self._db.execute(
            select(Event)
            .where(Event.date_time > now)
            .order_by(Event.date_time.asc(), Event.location.asc())
        )
        return list(result.scalars().all())

    async def claim_admission(self, event_id: int, seen_version: int) -> bool:
        result = await self._db.execute(
            update(Event)
            .where(Event.id == event_id, Event.version == seen_version)
            .values(version=Event.version + 1)
        )
        return result.rowcount == 1


class SqlRegistrationStore(_SessionStore, RegistrationStore):
    async def get_registration(self, event_id: int, user_id: int) -> Optional[Registration]:
        result = await self._db.execute(
            select(Registration).where(
                Registration.event_id == event_id,
                Registration.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_for_event(self, event_id: int) -> int:
        result = await self._db.execute(
            select(func.count()).select_from(Registration).where(Registration.event_id == event_id)
        )
        return result.scalar_one()

    async def add_registration(self, event_id: int, user_id: int) -> Registration:
        registration = Registration(event_id=event_id, user_id=user_id)
        self._db.add(registration)
        try:
            await self._db.flush()
        except IntegrityError:
            # Lost a race against the same (event, user) pair
            await self._db.rollback()
            raise AlreadyRegisteredError(event_id, user_id)
        return registration

    async def delete_registration(self, event_id: int, user_id: int) -> None:
        await self._db.execute(
            delete(Registration).where(
                Registration.event_id == event_id,
                Registration.user_id == user_id,
            )
        )

    async def list_registered_users(self, event_id: int) -> list[RegisteredUser]:
        # Outer join: user ids are not validated, unknown users still show up
        result = await self._db.execute(
            select(Registration.user_id, User.name, User.email)
            .outerjoin(User, User.id == Registration.user_id)
            .where(Registration.event_id == event_id)
            .order_by(Registration.id.asc())
        )
        return [
            RegisteredUser(id=user_id, name=name, email=email)
            for user_id, name, email in result.all()
        ]
