"""Error types and the handlers that render them as ErrorResponse JSON."""

import logging
from typing import Any, Callable

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """An error whose message is safe to show the client.

    Subclasses fix the status code and the error category; the message
    defaults to the wording clients expect for that category.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type = "api_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(APIError):
    """No profile matched the identifier."""

    status_code = status.HTTP_404_NOT_FOUND
    error_type = "not_found"

    def __init__(self, message: str = "Profile not found") -> None:
        super().__init__(message)


class ValidationError(APIError):
    """Input failed the minimal shape checks."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "validation_error"

    def __init__(self, message: str = "Validation error") -> None:
        super().__init__(message)


class ConflictError(APIError):
    """Unique identifier already in use."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_type = "conflict"

    def __init__(self, message: str = "Username is already taken.") -> None:
        super().__init__(message)


class StorageError(APIError):
    """Durable storage failure.

    The message is what the client sees; the underlying driver error is
    chained as the cause and only logged.
    """

    error_type = "storage_error"

    def __init__(self, message: str = "Server error") -> None:
        super().__init__(message)


def create_error_response(
    error_type: str,
    message: str,
    status_code: int,
    details: list[dict[str, Any]] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Render an ErrorResponse body with the given status.

    Args:
        error_type: Value of the "error" field.
        message: Text returned to the client.
        status_code: HTTP status code.
        details: Per-field problems, only set for malformed bodies.
        request_id: Request ID echoed back for tracing.
    """
    body = ErrorResponse(error=error_type, message=message, details=details, request_id=request_id)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def _render(error: APIError, request_id: str | None) -> JSONResponse:
    return create_error_response(error.error_type, error.message, error.status_code, request_id=request_id)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 validation errors.

    Replaces FastAPI's default 422 so that body shape failures look like
    every other validation failure.
    """
    details = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        }
        for error in exc.errors()
    ]
    logger.warning("Rejected malformed request to %s: %s", request.url.path, details)
    return create_error_response(
        error_type=ValidationError.error_type,
        message="Request body is invalid",
        status_code=ValidationError.status_code,
        details=details,
        request_id=request.headers.get("X-Request-ID"),
    )


async def error_handler_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
    """Turn exceptions raised by route handlers into ErrorResponse JSON.

    API errors keep their status and message. Storage failures and anything
    unexpected are logged with the traceback; the client only ever sees the
    generic message.
    """
    request_id = request.headers.get("X-Request-ID")
    log_extra = {"request_id": request_id, "path": request.url.path}

    try:
        return await call_next(request)
    except StorageError as e:
        logger.exception("Storage failure (%s): %s", e.message, e.__cause__, extra=log_extra)
        return _render(e, request_id)
    except APIError as e:
        logger.warning("%s on %s: %s", e.error_type, request.url.path, e.message, extra=log_extra)
        return _render(e, request_id)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, extra=log_extra)
        return create_error_response(
            error_type="internal_error",
            message="An unexpected error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            request_id=request_id,
        )
