"""
Exception handlers: the single place where domain errors become HTTP responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import (
    ConflictError,
    DomainError,
    ErrorCode,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    StorageFailureError,
)
from app.core.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_CATEGORY = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    StorageFailureError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: DomainError) -> int:
    for category, status_code in STATUS_BY_CATEGORY.items():
        if isinstance(error, category):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(code: ErrorCode, message: str) -> dict:
    return {"error": message, "code": code.value}


def _describe_validation_errors(errors: list[dict]) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error["loc"] if part not in ("body", "path", "query"))
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=status_for(exc), content=error_body(exc.code, exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.info("request_invalid", errors=len(errors))
    body = error_body(ErrorCode.INVALID_INPUT, _describe_validation_errors(errors))
    body["details"] = jsonable_encoder(errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Never leak driver messages to the caller
    logger.error("storage_failure", error_type=type(exc).__name__, error=str(exc))
    failure = StorageFailureError()
    return JSONResponse(status_code=status_for(failure), content=error_body(failure.code, failure.message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
