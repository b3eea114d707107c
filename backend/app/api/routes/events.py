"""
Event endpoints: creation, details, upcoming listing and statistics.
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_event_service
from app.schemas.event import (
    EventCreate,
    EventCreatedResponse,
    EventDetailResponse,
    EventResponse,
    EventStats,
    UpcomingEventsResponse,
)
from app.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("", response_model=EventCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    service: EventService = Depends(get_event_service),
):
    """Create a new event. Capacity must be between 1 and 1000."""
    event = await service.create_event(event_data)
    return EventCreatedResponse(eventId=event.id)


# Literal paths must be declared before /{event_id}
@router.get("/upcoming", response_model=UpcomingEventsResponse)
async def list_upcoming_endpoint(service: EventService = Depends(get_event_service)):
    """Events that have not started yet, ordered by date_time then location."""
    events = await service.list_upcoming()
    return UpcomingEventsResponse(
        upcoming_events=[EventResponse.model_validate(e) for e in events]
    )


@router.get("/{event_id}/stats", response_model=EventStats)
async def event_stats_endpoint(
    event_id: int,
    service: EventService = Depends(get_event_service),
):
    return await service.get_stats(event_id)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event_endpoint(
    event_id: int,
    service: EventService = Depends(get_event_service),
):
    """Get a single event with the users registered for it."""
    event, users = await service.get_event_details(event_id)
    return EventDetailResponse(
        **EventResponse.model_validate(event).model_dump(),
        registered_users=users,
    )
