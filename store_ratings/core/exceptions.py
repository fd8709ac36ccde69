"""
Application error taxonomy and the FastAPI handlers that turn it into
HTTP responses.

Services raise these instead of building HTTP responses themselves; the
handlers registered in ``main.create_app`` map each class to its status code
and a ``{"detail": ...}`` body.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    headers: Optional[dict] = None

    def __init__(self, detail: Optional[str] = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid input"


class InvalidOperation(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Operation not allowed"


class InvalidOrExpiredToken(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid or expired token"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authorization token missing"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidToken(Unauthorized):
    detail = "Invalid or expired token"


class InvalidCredentials(Unauthorized):
    detail = "Invalid credentials"


class IncorrectPassword(Unauthorized):
    detail = "Old password is incorrect"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Resource already exists"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or ValidationError.detail


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail = _format_validation_errors(exc)
    logger.warning("Rejected request %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure in full, tell the client nothing beyond a 500."""
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to *app*."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
