"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from app.core.clock import as_utc

MIN_CAPACITY = 1
MAX_CAPACITY = 1000


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    date_time: datetime
    location: str = Field(..., min_length=1, max_length=255)
    capacity: int = Field(..., ge=MIN_CAPACITY, le=MAX_CAPACITY)

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, value: datetime) -> datetime:
        return as_utc(value)


class EventCreatedResponse(BaseModel):
    message: str = "Event created successfully"
    eventId: int


class EventResponse(BaseModel):
    id: int
    title: str
    date_time: datetime
    location: str
    capacity: int
    created_at: datetime

    model_config = {"from_attributes": True}


class RegisteredUser(BaseModel):
    id: int
    name: Optional[str] = None
    email: Optional[str] = None


class EventDetailResponse(EventResponse):
    registered_users: list[RegisteredUser]


class UpcomingEventsResponse(BaseModel):
    upcoming_events: list[EventResponse]


class EventStats(BaseModel):
    total_registrations: int
    remaining_capacity: int
    percent_used: str
