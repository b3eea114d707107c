"""
Dependency wiring: builds services around the request's database session.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.event_service import EventService
from app.services.registration_service import RegistrationService
from app.stores.sql_store import SqlEventStore, SqlRegistrationStore


def get_event_service(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(SqlEventStore(db), SqlRegistrationStore(db))


def get_registration_service(db: AsyncSession = Depends(get_db)) -> RegistrationService:
    return RegistrationService(SqlEventStore(db), SqlRegistrationStore(db))
