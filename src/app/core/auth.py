"""
Authentication and Authorization Module

FastAPI dependencies that validate Bearer JWTs and expose the caller as a
`CurrentUser`. Subscription-level gating lives in
`app.modules.subscriptions.dependencies` because it needs the user's stored
plan and expiry.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError

from app.core.errors import AuthenticationError, PermissionDeniedError
from app.core.security import ACCESS_TOKEN_TYPE, decode_token

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

# auto_error=False so a missing header produces our 401 envelope instead of FastAPI's 403
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    The authenticated caller, populated from JWT claims.

    Attributes:
        id: User's unique identifier
        email: User's email address
        role: `student` or `admin`
        subscription_type: Plan recorded when the token was issued
    """

    id: UUID
    email: str
    role: str
    subscription_type: str = "free"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email}, role={self.role})"


def _validate_jwt_token(token: str) -> CurrentUser:
    """
    Validate an access token and extract the user claims.

    Raises:
        AuthenticationError: TOKEN_EXPIRED, INVALID_TOKEN
    """
    try:
        payload = decode_token(token, raise_on_error=True)
    except ExpiredSignatureError as e:
        raise AuthenticationError("Authentication token has expired.", "TOKEN_EXPIRED") from e
    except JWTError as e:
        logger.warning("Rejected JWT that failed verification")
        raise AuthenticationError("Invalid authentication token.", "INVALID_TOKEN") from e

    if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise AuthenticationError("This endpoint requires an access token.", "INVALID_TOKEN")

    try:
        user_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise AuthenticationError("Token contains invalid claims.", "INVALID_TOKEN") from e

    return CurrentUser(
        id=user_id,
        email=payload.get("email", ""),
        role=payload.get("role", "student"),
        subscription_type=payload.get("subscriptionType", "free"),
    )


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    Require a valid access token.

    Usage:
        @router.get("/me")
        async def me(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    if credentials is None:
        raise AuthenticationError("Access token required.")

    user = _validate_jwt_token(credentials.credentials)
    request.state.user_id = str(user.id)
    return user


async def get_optional_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser | None:
    """Return the caller when a valid token is sent, otherwise None."""
    if credentials is None:
        return None
    try:
        return await get_current_user(request, credentials)
    except AuthenticationError:
        return None


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require the `admin` role."""
    if not user.is_admin:
        logger.warning(f"Admin access denied for user {user.id} with role '{user.role}'")
        raise PermissionDeniedError("Admin access required.")
    return user


__all__ = [
    "ADMIN_ROLE",
    "CurrentUser",
    "get_current_user",
    "get_optional_user",
    "require_admin",
]
