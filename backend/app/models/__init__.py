from app.models.event import Event
from app.models.registration import Registration
from app.models.user import User

__all__ = ["Event", "Registration", "User"]
