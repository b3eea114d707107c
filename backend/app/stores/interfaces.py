"""
Store interfaces (repository pattern).
Allows swapping the persistence backend without changing business logic.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from app.models.event import Event
from app.models.registration import Registration
from app.schemas.event import RegisteredUser


class TransactionalStore(ABC):
    """Both stores of a request share one transaction; either may end it."""

    @abstractmethod
    async def commit(self) -> None:
        """
        Make the request's writes durable.

        Services call this before reporting success, so a failed commit
        reaches the caller as a storage failure instead of a false 201.
        """
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discard pending changes so the next read sees committed state."""
        ...


class EventStore(TransactionalStore):
    """Persistence operations on events."""

    @abstractmethod
    async def add_event(self, title: str, date_time: datetime, location: str, capacity: int) -> Event:
        """Persist a new event and return it with its assigned id."""
        ...

    @abstractmethod
    async def get_event(self, event_id: int) -> Optional[Event]:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    async def list_upcoming(self, now: datetime) -> list[Event]:
        """Return events strictly after `now`, ordered by date_time then location."""
        ...

    @abstractmethod
    async def claim_admission(self, event_id: int, seen_version: int) -> bool:
        """
        Bump the event's version if it still equals `seen_version`.

        Returns:
            True if this caller won the admission slot
            False if another admission changed the event since it was read
        """
        ...


class RegistrationStore(TransactionalStore):
    """Persistence operations on registrations."""

    @abstractmethod
    async def get_registration(self, event_id: int, user_id: int) -> Optional[Registration]:
        ...

    @abstractmethod
    async def count_for_event(self, event_id: int) -> int:
        ...

    @abstractmethod
    async def add_registration(self, event_id: int, user_id: int) -> Registration:
        """
        Insert a registration.

        Raises:
            AlreadyRegisteredError: the (event_id, user_id) pair already exists
        """
        ...

    @abstractmethod
    async def delete_registration(self, event_id: int, user_id: int) -> None:
        ...

    @abstractmethod
    async def list_registered_users(self, event_id: int) -> list[RegisteredUser]:
        """Users registered for an event, in registration order."""
        ...
