"""
Registration endpoints. Admission rules live in RegistrationService.
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_registration_service
from app.schemas.registration import RegistrationCreate, MessageResponse
from app.services.registration_service import RegistrationService

router = APIRouter(prefix="/events", tags=["Registrations"])


@router.post("/{event_id}/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    event_id: int,
    registration: RegistrationCreate,
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Register a user for an event.

    Fails with 404 for an unknown event, 400 for a past or full event and
    409 when the user is already registered.
    """
    await service.register(event_id, registration.user_id)
    return MessageResponse(message="User registered successfully")


@router.delete("/{event_id}/register/{user_id}", response_model=MessageResponse)
async def cancel_registration_endpoint(
    event_id: int,
    user_id: int,
    service: RegistrationService = Depends(get_registration_service),
):
    """Cancel a registration. Allowed for past events as well."""
    await service.cancel(event_id, user_id)
    return MessageResponse(message="Registration cancelled successfully")
