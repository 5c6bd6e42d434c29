"""
Application Errors

Base exception hierarchy shared by services, dependencies and middleware.
Every error carries a machine-readable code and an HTTP status; the global
handlers in error_handlers.py turn them into the JSON error envelope.
"""

from typing import Any


class AppError(Exception):
    """Base exception for all expected API errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 400,
        details: Any = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        self.headers = headers
        super().__init__(message)


class ValidationFailedError(AppError):
    """Raised when input passes schema validation but breaks a business rule."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR", details: Any = None):
        super().__init__(message=message, error_code=error_code, status_code=400, details=details)


class AuthenticationError(AppError):
    """Raised when a request carries no usable credentials."""

    def __init__(self, message: str = "Authentication required.", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class PermissionDeniedError(AppError):
    """Raised when an authenticated user may not perform an action."""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action.",
        error_code: str = "FORBIDDEN",
        details: Any = None,
    ):
        super().__init__(message=message, error_code=error_code, status_code=403, details=details)


class NotFoundError(AppError):
    """Raised when a resource does not exist or is not visible to the caller."""

    def __init__(self, resource: str, resource_id: Any = None):
        message = f"{resource} {resource_id} not found" if resource_id else f"{resource} not found"
        code = resource.upper().replace(" ", "_") + "_NOT_FOUND"
        super().__init__(message=message, error_code=code, status_code=404)


class ConflictError(AppError):
    """Raised when a write collides with existing state."""

    def __init__(self, message: str, error_code: str = "CONFLICT", details: Any = None):
        super().__init__(message=message, error_code=error_code, status_code=409, details=details)


class RateLimitExceeded(AppError):
    """Raised when a client exceeds its request quota."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            message=f"Too many requests. Maximum {limit} requests per {window_seconds} seconds.",
            error_code="RATE_LIMITED",
            status_code=429,
            details={"retryAfterSeconds": window_seconds},
            headers={"Retry-After": str(window_seconds)},
        )


__all__ = [
    "AppError",
    "AuthenticationError",
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitExceeded",
    "ValidationFailedError",
]
