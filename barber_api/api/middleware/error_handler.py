"""
Booking API errors and the handlers that render them.

Services raise an AppException subclass where a rule is broken (a missing
barber, a booking owned by someone else, a disallowed status move). The
handlers registered in app.py turn those, plus FastAPI's own request
validation and routing errors, into one body shape:

    {"error": "<message>", "correlation_id": "<id>", "details": {...}}

`details` is omitted when empty.
"""
import logging
from typing import Optional, Dict, Any
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from barber_api.lib.logging import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """Base for every error the booking services raise on purpose."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(AppException):
    """A barber, service, booking or user that does not exist."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "resource_id": resource_id},
        )


class UnauthorizedException(AppException):
    """Bad login, or a missing, expired or revoked bearer token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED)


class ForbiddenException(AppException):
    """Caller is authenticated but does not own the booking or lacks the role."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, status_code=status.HTTP_403_FORBIDDEN)


class BadRequestException(AppException):
    """Request breaks a booking rule, e.g. a disallowed status transition."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class ConflictException(AppException):
    """Duplicate email, or a booking whose status moved under the request."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=status.HTTP_409_CONFLICT, details=details)


class PaymentProviderException(AppException):
    """Downstream payment provider failure. Surfaced as-is, never retried."""

    def __init__(self, message: str = "Payment provider error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=status.HTTP_502_BAD_GATEWAY, details=details)


def _error_response(
    request: Request,
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": message,
        "correlation_id": getattr(request.state, "correlation_id", "unknown"),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _request_fields(request: Request) -> Dict[str, Any]:
    return {"path": request.url.path, "method": request.method}


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render a service error. 5xx (payment provider) logs at ERROR, the rest at WARNING."""
    log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    logger.log(
        log_level,
        f"Request rejected: {exc.message}",
        extra={
            **_request_fields(request),
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
            "details": exc.details,
        },
    )
    return _error_response(request, exc.status_code, exc.message, exc.details)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed payload or query (bad rating, unknown status, missing field).

    Each pydantic error is reduced to its location, message and type.
    """
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning(
        "Invalid request payload",
        extra={**_request_fields(request), "errors": errors},
    )
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        {"errors": errors},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    # Unknown routes, wrong methods, bearer scheme errors
    logger.warning(
        f"Routing error: {exc.detail}",
        extra={**_request_fields(request), "status_code": exc.status_code},
    )
    return _error_response(
        request,
        exc.status_code,
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, hide the cause from the caller."""
    logger.error(
        f"Unexpected failure handling {request.method} {request.url.path}: {exc}",
        extra=_request_fields(request),
        exc_info=True,
    )
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
