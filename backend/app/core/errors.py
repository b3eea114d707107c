"""
Domain errors raised by services and stores.

Each concrete error belongs to one category of the taxonomy below. The HTTP
layer (app.api.errors) is the only place that turns a category into a status
code, so services never import FastAPI.

    InvalidInputError   malformed or out-of-range request     -> 400
    NotFoundError       referenced event/registration absent  -> 404
    ConflictError       duplicate or contended registration   -> 409
    InvalidStateError   business rule violated (past, full)   -> 400
    StorageFailureError store error not otherwise classified  -> 500
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes returned in error bodies."""

    INVALID_INPUT = "INVALID_INPUT"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    REGISTRATION_NOT_FOUND = "REGISTRATION_NOT_FOUND"
    ALREADY_REGISTERED = "ALREADY_REGISTERED"
    REGISTRATION_CONTENTION = "REGISTRATION_CONTENTION"
    PAST_EVENT = "PAST_EVENT"
    EVENT_FULL = "EVENT_FULL"
    STORAGE_FAILURE = "STORAGE_FAILURE"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInputError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class NotFoundError(DomainError):
    pass


class ConflictError(DomainError):
    pass


class InvalidStateError(DomainError):
    pass


class StorageFailureError(DomainError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(code=ErrorCode.STORAGE_FAILURE, message=message)


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: int) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class RegistrationNotFoundError(NotFoundError):
    """Raised when cancelling a registration that does not exist."""

    def __init__(self, event_id: int, user_id: int) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_NOT_FOUND,
            message="User is not registered for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class AlreadyRegisteredError(ConflictError):
    def __init__(self, event_id: int, user_id: int) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REGISTERED,
            message="User already registered for this event",
        )
        self.event_id = event_id
        self.user_id = user_id


class RegistrationContentionError(ConflictError):
    """Raised when concurrent admissions kept invalidating our capacity check."""

    def __init__(self, event_id: int) -> None:
        super().__init__(
            code=ErrorCode.REGISTRATION_CONTENTION,
            message="Registration failed due to high demand. Please try again.",
        )
        self.event_id = event_id


class PastEventError(InvalidStateError):
    def __init__(self, event_id: int) -> None:
        super().__init__(code=ErrorCode.PAST_EVENT, message="Cannot register for past events")
        self.event_id = event_id


class EventFullError(InvalidStateError):
    def __init__(self, event_id: int, capacity: int) -> None:
        super().__init__(code=ErrorCode.EVENT_FULL, message="Event is full")
        self.event_id = event_id
        self.capacity = capacity
