"""Exception-to-HTTP mapping for the catalog API.

Every error leaves the service in the same envelope::

    {"error": {"code": "...", "message": "...", "details": {...} | null}}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...domain.exceptions import (
    BlobStorageException,
    CacheException,
    ConfigurationException,
    ConflictException,
    DomainException,
    EntityNotFoundException,
    EventPublishException,
    ImageLimitExceededException,
    ImageOwnershipException,
    InvalidImageException,
    StoreException,
)

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"
INTERNAL_ERROR_MESSAGE = "An internal server error occurred"


class ErrorDetail(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable description")
    details: dict[str, Any] | None = Field(None, description="Context such as the offending id")


class ErrorResponse(BaseModel):
    model_config = ConfigDict(strict=True, frozen=True)

    error: ErrorDetail


# Looked up along the MRO, so subclasses inherit their parent's status
EXCEPTION_STATUS_MAP: dict[type[DomainException], int] = {
    EntityNotFoundException: status.HTTP_404_NOT_FOUND,
    ConflictException: status.HTTP_409_CONFLICT,
    ImageLimitExceededException: status.HTTP_400_BAD_REQUEST,
    ImageOwnershipException: status.HTTP_400_BAD_REQUEST,
    InvalidImageException: status.HTTP_400_BAD_REQUEST,
    ConfigurationException: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreException: status.HTTP_500_INTERNAL_SERVER_ERROR,
    CacheException: status.HTTP_500_INTERNAL_SERVER_ERROR,
    BlobStorageException: status.HTTP_500_INTERNAL_SERVER_ERROR,
    EventPublishException: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: DomainException) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _envelope(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def create_error_response(
    exception: Exception, status_code: int, details: dict[str, Any] | None = None
) -> JSONResponse:
    """Render ``exception`` in the error envelope.

    Only domain exceptions expose their code and message; anything else is
    reported as a generic internal error.
    """
    if isinstance(exception, DomainException):
        return _envelope(status_code, exception.error_code, exception.message, details)
    return _envelope(status_code, INTERNAL_ERROR_CODE, INTERNAL_ERROR_MESSAGE, details)


def _describe(request: Request) -> str:
    return f"{request.method} {request.url.path}"


def _location(error: dict[str, Any]) -> str:
    return ".".join(str(part) for part in error.get("loc", ()))


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_code_for(exc)
    summary = f"{exc.error_code} on {_describe(request)}: {exc.message}"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(summary, exc_info=exc)
    else:
        logger.warning(summary)
    return create_error_response(exc, status_code, exc.details or None)


async def validation_exception_handler(
    request: Request, exc: ValidationError | RequestValidationError
) -> JSONResponse:
    """422 for request parsing errors and for entities rejected inside a service."""
    errors = exc.errors()
    logger.warning(f"Validation failed on {_describe(request)} with {len(errors)} error(s)")

    first = errors[0] if errors else {}
    field = _location(first)
    return _envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        f"Validation failed for field '{field}': {first.get('msg', 'Invalid input data')}",
        {
            "field": field,
            "error_type": first.get("type", "validation_error"),
            "errors": [
                {"field": _location(e), "message": e.get("msg", ""), "type": e.get("type", "")}
                for e in errors
            ],
        },
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    logger.info(f"HTTP {exc.status_code} on {_describe(request)}: {exc.detail}")
    return _envelope(
        exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail), headers=exc.headers
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {_describe(request)}", exc_info=exc)
    return create_error_response(exc, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
