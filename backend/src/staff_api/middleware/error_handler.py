"""Global error handling that maps domain errors to uniform JSON bodies.

Every error response has the shape ``{"message": ..., "errors": [...]}``
where ``errors`` lists ``{field, message, value}`` entries when fields are
at fault. Unexpected failures are logged and reported generically.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from staff_api.config import get_settings
from staff_api.exceptions import (
    ConflictError,
    HasDependentsError,
    InvalidManagerAssignmentError,
    NotFoundError,
    StaffAPIError,
    ValidationError,
    ValidationFailedError,
)
from staff_api.security.rate_limit import ADMIN_RETRY_AFTER
from staff_api.utils.secure_logging import sanitize_exception_message

logger = logging.getLogger(__name__)

# Safe error messages that can be shown to users
SAFE_ERROR_MESSAGES = {
    400: "Invalid request",
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    405: "Method not allowed",
    429: "Too many requests",
    500: "Internal server error",
}

# Error messages that are safe to pass through
ALLOWED_ERROR_PATTERNS = [
    "Authentication required",
    "Access denied",
    "Admin access required",
    "Insufficient permissions",
    "Not Found",
    "Method Not Allowed",
]

MANAGER_FIELD = "jobInfo.manager"
RATE_LIMIT_MESSAGE = "Too many admin requests, please try again later."


def _get_cors_headers(request: Request) -> dict[str, str]:
    """CORS headers for error responses produced outside CORSMiddleware."""
    origin = request.headers.get("origin")
    if origin and origin in get_settings().cors_origins_list:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return {}


def is_safe_error_message(message: str) -> bool:
    """Check if an error message is safe to expose to users."""
    message_lower = message.lower()
    return any(pattern.lower() in message_lower for pattern in ALLOWED_ERROR_PATTERNS)


def sanitize_error_detail(detail: Any, status_code: int) -> str:
    """Return ``detail`` if it is a known safe message, else a generic one."""
    if isinstance(detail, str) and is_safe_error_message(detail):
        return detail
    return SAFE_ERROR_MESSAGES.get(status_code, "Request failed")


def error_body(message: str, errors: list[dict[str, Any]] | None = None, **extra: Any) -> dict[str, Any]:
    """Build the uniform error body."""
    body: dict[str, Any] = {"message": message}
    if errors is not None:
        body["errors"] = errors
    body.update(extra)
    return body


async def staff_api_exception_handler(request: Request, exc: StaffAPIError) -> JSONResponse:
    """Handle domain exceptions.

    Args:
        request: FastAPI request
        exc: Domain exception

    Returns:
        JSONResponse with the mapped status and body
    """
    cors_headers = _get_cors_headers(request)

    if isinstance(exc, ValidationFailedError):
        content = error_body(exc.message, [error.to_dict() for error in exc.errors])
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, InvalidManagerAssignmentError):
        value = str(exc.manager_id) if exc.manager_id is not None else None
        content = error_body(exc.message, [{"field": MANAGER_FIELD, "message": exc.reason, "value": value}])
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, HasDependentsError):
        content = error_body(exc.message, managedEmployees=exc.dependents)
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, (ValidationError, ConflictError)):
        content = error_body(exc.message)
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        content = error_body(exc.message)
        status_code = status.HTTP_404_NOT_FOUND
    else:
        logger.error("Unmapped domain error %s: %s", type(exc).__name__, exc.message)
        content = error_body(SAFE_ERROR_MESSAGES[500])
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.info("%s %s -> %s: %s", request.method, request.url.path, status_code, exc.message)
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with sanitized messages."""
    headers = {**_get_cors_headers(request), **(exc.headers or {})}

    if get_settings().debug:
        message = str(exc.detail)
    else:
        message = sanitize_error_detail(exc.detail, exc.status_code)

    return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request parsing failures (query, path, body) as field errors."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        # Drop the source prefix ("query", "body", "path")
        field = ".".join(loc[1:] if len(loc) > 1 else loc) or "request"
        value = error.get("input")
        if not isinstance(value, (str, int, float, bool)) or value is None:
            value = None
        errors.append({"field": field, "message": error.get("msg", "Invalid value"), "value": value})

    logger.warning("Validation error for %s: %d field(s)", request.url.path, len(errors))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", errors),
        headers=_get_cors_headers(request),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Reject a request over its rate limit."""
    logger.warning("Rate limit exceeded on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": RATE_LIMIT_MESSAGE, "retryAfter": ADMIN_RETRY_AFTER},
        headers=_get_cors_headers(request),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database errors without leaking database details."""
    logger.error(
        "Database error for %s: %s",
        request.url.path,
        sanitize_exception_message(exc),
        exc_info=get_settings().debug,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(SAFE_ERROR_MESSAGES[500]),
        headers=_get_cors_headers(request),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking information."""
    logger.error("Unhandled exception for %s: %s", request.url.path, exc, exc_info=True)

    if get_settings().debug:
        content = error_body(str(exc), type=type(exc).__name__)
    else:
        content = error_body(SAFE_ERROR_MESSAGES[500])

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_get_cors_headers(request),
    )
