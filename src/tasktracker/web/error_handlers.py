import logging
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from tasktracker.config import Config
from tasktracker.errors import (
    AuthenticationError,
    ConflictError,
    InvalidOrExpiredTokenError,
    NotFoundError,
    TooManyRequestsError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def create_json_error_response(
    status_code: int, message: str, error_type: str | None = None, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSON error response with optional type for machine parsing."""
    content = {"message": message}
    if error_type:
        content["type"] = error_type
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    headers = None
    if isinstance(exc, AuthenticationError):
        status_code = 401
        error_type = "authentication_error"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        error_type = "not_found"
    elif isinstance(exc, ConflictError):
        status_code = 409
        error_type = "conflict"
    elif isinstance(exc, TooManyRequestsError):
        status_code = 429
        error_type = "too_many_requests"
        headers = {"Retry-After": str(exc.retry_after)}
    elif isinstance(exc, InvalidOrExpiredTokenError):
        status_code = 400
        error_type = "invalid_or_expired_token"
    elif isinstance(exc, ValidationError):
        status_code = 400
        error_type = "validation_error"
    else:
        # Default for any other UserError subclass
        status_code = 400
        error_type = "bad_request"

    return create_json_error_response(status_code=status_code, message=str(exc), error_type=error_type, headers=headers)


async def request_validation_error_handler(_: Request, exc: Exception) -> Response:
    """Report malformed or missing request fields as 400."""
    errors = cast(RequestValidationError, exc).errors()
    parts = []
    for error in errors:
        # Drop the leading "body"/"query"/"path" location
        location = ".".join(str(item) for item in error["loc"][1:])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return create_json_error_response(
        status_code=400, message="; ".join(parts) or "Invalid request", error_type="validation_error"
    )


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500). Details are only shown in debug mode."""
    logger.exception("Unexpected error: %s", exc)
    config = cast(Config, request.app.state.config)
    message = f"{type(exc).__name__}: {exc}" if config.debug else "An unexpected error occurred."
    return create_json_error_response(status_code=500, message=message, error_type="internal_server_error")
