from app.schemas.event import (
    EventCreate,
    EventCreatedResponse,
    EventResponse,
    EventDetailResponse,
    RegisteredUser,
    UpcomingEventsResponse,
    EventStats,
)
from app.schemas.registration import RegistrationCreate, MessageResponse

__all__ = [
    "EventCreate", "EventCreatedResponse", "EventResponse", "EventDetailResponse",
    "RegisteredUser", "UpcomingEventsResponse", "EventStats",
    "RegistrationCreate", "MessageResponse",
]
