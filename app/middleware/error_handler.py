"""
Error taxonomy and FastAPI exception handlers.

Every failure is rendered as ``{"ok": false, "message": ...}``:
- Application errors carry their own status code and user-facing message
- Request validation failures become 400s
- Database and unexpected errors become a generic 500; detail stays in the log
"""

import logging
from contextlib import contextmanager

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.s3 import ObjectStoreError

logger = logging.getLogger(__name__)


class ErrorCategory:
    """Error categories for structured error handling"""
    UNAUTHENTICATED = "unauthenticated"
    INVALID_ARGUMENT = "invalid_argument"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AppError(Exception):
    """Base application error with a user-facing message"""

    def __init__(
        self,
        message: str,
        category: str = ErrorCategory.INTERNAL,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ):
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    def __init__(self, message: str = "Invalid authentication token."):
        super().__init__(
            message, ErrorCategory.UNAUTHENTICATED, status.HTTP_401_UNAUTHORIZED
        )


class InvalidArgumentError(AppError):
    def __init__(self, message: str):
        super().__init__(
            message, ErrorCategory.INVALID_ARGUMENT, status.HTTP_400_BAD_REQUEST
        )


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden."):
        super().__init__(message, ErrorCategory.FORBIDDEN, status.HTTP_403_FORBIDDEN)


class NotFoundError(AppError):
    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.NOT_FOUND, status.HTTP_404_NOT_FOUND)


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.CONFLICT, status.HTTP_409_CONFLICT)


class InternalError(AppError):
    def __init__(self, message: str = "Internal server error."):
        super().__init__(
            message, ErrorCategory.INTERNAL, status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def error_body(message: str) -> dict:
    return {"ok": False, "message": message}


def handle_app_error(error: AppError, request: Request) -> JSONResponse:
    """Handle structured application errors"""
    log = logger.error if error.status_code >= 500 else logger.info
    log(
        "Application error: %s %s -> %s (%s)",
        request.method,
        request.url.path,
        error.status_code,
        error.category,
    )
    return JSONResponse(status_code=error.status_code, content=error_body(error.message))


def handle_validation_error(
    error: RequestValidationError, request: Request
) -> JSONResponse:
    """Handle FastAPI validation errors"""
    errors = [
        {
            "field": ".".join(str(loc) for loc in err.get("loc", ())),
            "message": err.get("msg"),
        }
        for err in error.errors()
    ]
    logger.warning(
        "Validation error on %s %s: %s", request.method, request.url.path, errors
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid request body."),
    )


def handle_http_error(error: StarletteHTTPException, request: Request) -> JSONResponse:
    message = error.detail if isinstance(error.detail, str) else "Request failed."
    return JSONResponse(
        status_code=error.status_code,
        content=error_body(message),
        headers=getattr(error, "headers", None),
    )


def handle_database_error(error: SQLAlchemyError, request: Request) -> JSONResponse:
    """Handle database errors"""
    if isinstance(error, StaleDataError):
        logger.warning(
            "Concurrent modification on %s %s", request.method, request.url.path
        )
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body("The record was modified concurrently. Please retry."),
        )

    logger.error(
        "Database error on %s %s: %s",
        request.method,
        request.url.path,
        type(error).__name__,
        exc_info=error,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error."),
    )


def handle_unexpected_error(error: Exception, request: Request) -> JSONResponse:
    """Handle unexpected errors"""
    logger.critical(
        "Unexpected error on %s %s: %s",
        request.method,
        request.url.path,
        type(error).__name__,
        exc_info=error,
    )
    # Don't expose internal details
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error."),
    )


# Exception handlers for FastAPI
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return handle_app_error(exc, request)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return handle_validation_error(exc, request)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return handle_http_error(exc, request)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    return handle_database_error(exc, request)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return handle_unexpected_error(exc, request)


@contextmanager
def store_errors(operation: str, message: str):
    """
    Turn database and object store failures inside a handler into an
    ``InternalError`` carrying ``message``, logging the detail under
    ``operation``. Application errors pass through untouched.
    """
    try:
        yield
    except AppError:
        raise
    except StaleDataError:
        logger.warning("%s lost a concurrent update", operation)
        raise ConflictError("The record was modified concurrently. Please retry.")
    except (SQLAlchemyError, ObjectStoreError):
        logger.exception("%s failed", operation)
        raise InternalError(message)
