"""
Event service: creation, details, upcoming listing and capacity statistics.
"""

from datetime import datetime
from typing import Callable

from app.core.clock import utc_now
from app.core.errors import EventNotFoundError
from app.core.logging import get_logger
from app.core.metrics import record_event_created
from app.models.event import Event
from app.schemas.event import EventCreate, EventStats, RegisteredUser
from app.stores.interfaces import EventStore, RegistrationStore

logger = get_logger(__name__)


class EventService:
    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._clock = clock

    async def create_event(self, event_data: EventCreate) -> Event:
        """Persist a validated event. Past dates are accepted."""
        event = await self._events.add_event(
            title=event_data.title,
            date_time=event_data.date_time,
            location=event_data.location,
            capacity=event_data.capacity,
        )
        await self._events.commit()
        record_event_created()
        logger.info("event_created", event_id=event.id, title=event.title, capacity=event.capacity)
        return event

    async def get_event(self, event_id: int) -> Event:
        event = await self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def get_event_details(self, event_id: int) -> tuple[Event, list[RegisteredUser]]:
        """Return an event together with the users registered for it."""
        event = await self.get_event(event_id)
        users = await self._registrations.list_registered_users(event_id)
        return event, users

    async def list_upcoming(self) -> list[Event]:
        """Events strictly after now, soonest first, ties broken by location."""
        return await self._events.list_upcoming(self._clock())

    async def get_stats(self, event_id: int) -> EventStats:
        # capacity >= 1 is guaranteed at creation, so the division is safe
        event = await self.get_event(event_id)
        total = await self._registrations.count_for_event(event_id)
        return EventStats(
            total_registrations=total,
            remaining_capacity=event.capacity - total,
            percent_used=f"{total / event.capacity * 100:.2f}%",
        )
