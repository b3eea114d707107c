"""
Pytest fixtures for test database, client, and in-memory stores.

HTTP tests run against a fresh in-memory SQLite database per test (override
with TEST_DATABASE_URL). Service tests use the fake stores below, which
implement the same interfaces as the SQL stores.
"""

import asyncio
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.errors import AlreadyRegisteredError
from app.db.base import Base
from app.db.session import get_db
from app.models.event import Event
from app.models.registration import Registration
from app.models.user import User
from app.schemas.event import RegisteredUser
from app.stores.interfaces import EventStore, RegistrationStore

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _add_event(session: AsyncSession, **overrides) -> Event:
    values = {
        "title": "Test Concert",
        "date_time": datetime.now(timezone.utc) + timedelta(days=30),
        "location": "Test Venue",
        "capacity": 10,
    }
    values.update(overrides)
    event = Event(**values)
    session.add(event)
    await session.commit()
    await session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(name="Ada Lovelace", email="ada@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession) -> Event:
    """An event 30 days out with 10 places."""
    return await _add_event(db_session)


@pytest_asyncio.fixture
async def past_event(db_session: AsyncSession) -> Event:
    """An event that happened yesterday, with plenty of room left."""
    return await _add_event(
        db_session,
        title="Last Year's Meetup",
        date_time=datetime.now(timezone.utc) - timedelta(days=1),
        capacity=1000,
    )


@pytest_asyncio.fixture
async def full_event(db_session: AsyncSession) -> Event:
    """A single-place event whose place is already taken by user 500."""
    event = await _add_event(db_session, title="Sold Out Show", location="Full Venue", capacity=1)
    db_session.add(Registration(event_id=event.id, user_id=500))
    await db_session.commit()
    return event


# In-memory stores


@dataclass
class FakeEvent:
    id: int
    title: str
    date_time: datetime
    location: str
    capacity: int
    version: int = 1
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class FakeRegistration:
    event_id: int
    user_id: int


class FakeDatabase:
    """
    Shared state for the fake stores. Every store call yields to the event
    loop first, so coroutines run with asyncio.gather interleave between
    each check and the following write, like requests on separate connections.
    """

    def __init__(self) -> None:
        self.events: dict[int, FakeEvent] = {}
        self.registrations: list[FakeRegistration] = []
        self.users: dict[int, tuple[str, str]] = {}
        self.commits = 0
        self.rollbacks = 0

    def add_event(self, **overrides) -> FakeEvent:
        values = {
            "id": len(self.events) + 1,
            "title": "Fake Event",
            "date_time": datetime.now(timezone.utc) + timedelta(days=1),
            "location": "Fake Venue",
            "capacity": 10,
        }
        values.update(overrides)
        event = FakeEvent(**values)
        self.events[event.id] = event
        return event

    def registered(self, event_id: int) -> int:
        return sum(1 for r in self.registrations if r.event_id == event_id)


class FakeEventStore(EventStore):
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def add_event(self, title, date_time, location, capacity):
        await asyncio.sleep(0)
        return self.db.add_event(title=title, date_time=date_time, location=location, capacity=capacity)

    async def get_event(self, event_id) -> Optional[FakeEvent]:
        await asyncio.sleep(0)
        event = self.db.events.get(event_id)
        # Hand out a snapshot, as a fresh SELECT would
        return FakeEvent(**vars(event)) if event else None

    async def list_upcoming(self, now):
        await asyncio.sleep(0)
        upcoming = [e for e in self.db.events.values() if e.date_time > now]
        return sorted(upcoming, key=lambda e: (e.date_time, e.location))

    async def claim_admission(self, event_id, seen_version) -> bool:
        await asyncio.sleep(0)
        event = self.db.events[event_id]
        if event.version != seen_version:
            return False
        event.version += 1
        return True

    async def commit(self) -> None:
        self.db.commits += 1

    async def rollback(self) -> None:
        self.db.rollbacks += 1


class FakeRegistrationStore(RegistrationStore):
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def commit(self) -> None:
        self.db.commits += 1

    async def rollback(self) -> None:
        self.db.rollbacks += 1

    async def get_registration(self, event_id, user_id):
        await asyncio.sleep(0)
        for registration in self.db.registrations:
            if registration.event_id == event_id and registration.user_id == user_id:
                return registration
        return None

    async def count_for_event(self, event_id) -> int:
        await asyncio.sleep(0)
        return self.db.registered(event_id)

    async def add_registration(self, event_id, user_id):
        await asyncio.sleep(0)
        if any(r.event_id == event_id and r.user_id == user_id for r in self.db.registrations):
            raise AlreadyRegisteredError(event_id, user_id)
        registration = FakeRegistration(event_id=event_id, user_id=user_id)
        self.db.registrations.append(registration)
        return registration

    async def delete_registration(self, event_id, user_id) -> None:
        await asyncio.sleep(0)
        self.db.registrations = [
            r for r in self.db.registrations
            if not (r.event_id == event_id and r.user_id == user_id)
        ]

    async def list_registered_users(self, event_id):
        await asyncio.sleep(0)
        users = []
        for registration in self.db.registrations:
            if registration.event_id == event_id:
                name, email = self.db.users.get(registration.user_id, (None, None))
                users.append(RegisteredUser(id=registration.user_id, name=name, email=email))
        return users


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def fake_event_store(fake_db: FakeDatabase) -> FakeEventStore:
    return FakeEventStore(fake_db)


@pytest.fixture
def fake_registration_store(fake_db: FakeDatabase) -> FakeRegistrationStore:
    return FakeRegistrationStore(fake_db)
