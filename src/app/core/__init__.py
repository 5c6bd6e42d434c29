"""
Core module - settings, persistence, security and the shared request plumbing
(errors, authentication, pagination, sanitization) used by every domain module.
"""

from app.core.auth import CurrentUser, get_current_user, get_optional_user, require_admin
from app.core.config import settings
from app.core.database import Base, get_db
from app.core.errors import (
    AppError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitExceeded,
    ValidationFailedError,
)
from app.core.pagination import Pagination, get_pagination
from app.core.sanitize import PlainText, SafeHtml

__all__ = [
    # Settings / persistence
    "settings",
    "Base",
    "get_db",
    # Errors
    "AppError",
    "AuthenticationError",
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitExceeded",
    "ValidationFailedError",
    # Auth
    "CurrentUser",
    "get_current_user",
    "get_optional_user",
    "require_admin",
    # Requests
    "Pagination",
    "get_pagination",
    "PlainText",
    "SafeHtml",
]
