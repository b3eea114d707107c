"""
Registration service: admission control for event registrations.

ADMISSION RULES
===============

A registration is accepted only if, checked in this order:
  1. the event exists                                  -> EventNotFoundError
  2. the event starts strictly after now               -> PastEventError
  3. the user is not already registered for it         -> AlreadyRegisteredError
  4. fewer registrations than capacity exist           -> EventFullError

The order is part of the API: an event that cannot take registrations at all
is reported before the more specific "duplicate" or "full" failures.

CONCURRENCY STRATEGY: Optimistic Locking with Retry
====================================================

Problem:
  Two users try to take the last place simultaneously.
  Both count capacity-1 registrations, both insert, capacity is exceeded.

Solution:
  Every admission bumps events.version, conditioned on the version it read:

  1. Read the event (and its version), run checks 1-4
  2. UPDATE events SET version = version + 1
     WHERE id = :event_id AND version = :seen_version
  3. If rows_affected == 0, another admission for this event got in first
     -> roll back and run checks 1-4 again against fresh data

  The competing UPDATE blocks on the row lock until the winner commits and
  then matches zero rows, so at most one of two racing admissions can act on
  the same count. Duplicates of the same (event, user) pair are also stopped
  by the unique constraint on registrations.

Cancellation takes no lock: removing a registration can only make room.
"""

from datetime import datetime
from typing import Callable

from app.core.clock import utc_now
from app.core.errors import (
    AlreadyRegisteredError,
    DomainError,
    EventFullError,
    EventNotFoundError,
    PastEventError,
    RegistrationContentionError,
    RegistrationNotFoundError,
)
from app.core.logging import get_logger
from app.core.metrics import (
    record_admission_retry,
    record_cancellation,
    record_registration,
    registration_latency,
)
from app.stores.interfaces import EventStore, RegistrationStore

logger = get_logger(__name__)

MAX_ADMISSION_ATTEMPTS = 3


class RegistrationService:
    """Registers users for events and cancels registrations."""

    def __init__(
        self,
        events: EventStore,
        registrations: RegistrationStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._events = events
        self._registrations = registrations
        self._clock = clock

    async def register(self, event_id: int, user_id: int) -> None:
        """
        Register a user for an event.
        Re-runs the admission checks up to MAX_ADMISSION_ATTEMPTS times on
        version conflicts.
        """
        with registration_latency.time():
            for attempt in range(1, MAX_ADMISSION_ATTEMPTS + 1):
                event = await self._events.get_event(event_id)
                if event is None:
                    raise self._reject("not_found", EventNotFoundError(event_id), event_id, user_id)

                if event.date_time <= self._clock():
                    raise self._reject("past_event", PastEventError(event_id), event_id, user_id)

                if await self._registrations.get_registration(event_id, user_id) is not None:
                    raise self._reject("duplicate", AlreadyRegisteredError(event_id, user_id), event_id, user_id)

                registered = await self._registrations.count_for_event(event_id)
                if registered >= event.capacity:
                    raise self._reject("full", EventFullError(event_id, event.capacity), event_id, user_id)

                if not await self._events.claim_admission(event_id, event.version):
                    logger.info(
                        "registration_retry",
                        event_id=event_id,
                        user_id=user_id,
                        attempt=attempt,
                        reason="version_conflict",
                    )
                    record_admission_retry()
                    await self._events.rollback()
                    continue

                try:
                    await self._registrations.add_registration(event_id, user_id)
                except AlreadyRegisteredError as e:
                    raise self._reject("duplicate", e, event_id, user_id)

                await self._registrations.commit()

                record_registration("registered")
                logger.info(
                    "user_registered",
                    event_id=event_id,
                    user_id=user_id,
                    registered=registered + 1,
                    capacity=event.capacity,
                    attempt=attempt,
                )
                return

        raise self._reject("contention", RegistrationContentionError(event_id), event_id, user_id)

    async def cancel(self, event_id: int, user_id: int) -> None:
        """Cancel a registration. Past events may be cancelled too."""
        registration = await self._registrations.get_registration(event_id, user_id)
        if registration is None:
            record_cancellation("not_found")
            logger.info("cancellation_rejected", event_id=event_id, user_id=user_id)
            raise RegistrationNotFoundError(event_id, user_id)

        await self._registrations.delete_registration(event_id, user_id)
        await self._registrations.commit()
        record_cancellation("cancelled")
        logger.info("registration_cancelled", event_id=event_id, user_id=user_id)

    def _reject(self, outcome: str, error: DomainError, event_id: int, user_id: int) -> DomainError:
        record_registration(outcome)
        logger.info(
            "registration_rejected",
            outcome=outcome,
            code=error.code.value,
            event_id=event_id,
            user_id=user_id,
        )
        return error
