"""Middleware module"""

from app.middleware.error_handler import (
    AppError,
    ConflictError,
    ErrorCategory,
    ForbiddenError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    UnauthenticatedError,
    app_error_handler,
    database_error_handler,
    http_error_handler,
    store_errors,
    unexpected_error_handler,
    validation_error_handler,
)

__all__ = [
    "AppError",
    "ConflictError",
    "ErrorCategory",
    "ForbiddenError",
    "InternalError",
    "InvalidArgumentError",
    "NotFoundError",
    "UnauthenticatedError",
    "app_error_handler",
    "database_error_handler",
    "http_error_handler",
    "store_errors",
    "unexpected_error_handler",
    "validation_error_handler",
]
