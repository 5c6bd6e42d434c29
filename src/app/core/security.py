"""
Security Utilities

Password hashing (bcrypt), JWT issue/verify (python-jose) and opaque token
helpers for password resets.
"""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


# ============================================
# Passwords
# ============================================


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# ============================================
# JWT
# ============================================


def _create_token(
    subject: str,
    token_type: str,
    expires_delta: timedelta,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
    }
    if additional_claims:
        payload.update(additional_claims)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_access_token(
    subject: str,
    additional_claims: dict[str, Any] | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed access token.

    Args:
        subject: User ID stored in the `sub` claim
        additional_claims: Extra claims (email, role, subscriptionType)
        expires_delta: Override for the configured lifetime
    """
    return _create_token(
        subject,
        ACCESS_TOKEN_TYPE,
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
        additional_claims,
    )


def create_refresh_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed refresh token."""
    return _create_token(
        subject,
        REFRESH_TOKEN_TYPE,
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str, raise_on_error: bool = False) -> dict[str, Any] | None:
    """
    Decode and verify a JWT.

    Returns the payload, or None when the token is invalid or expired.
    With raise_on_error=True the underlying jose error propagates instead so
    callers can tell expiry apart from tampering.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        if raise_on_error:
            raise
        logger.debug("JWT expired")
        return None
    except JWTError:
        if raise_on_error:
            raise
        logger.debug("JWT failed verification")
        return None


# ============================================
# Opaque tokens
# ============================================


def generate_secure_token(nbytes: int = 32) -> str:
    """Generate a URL-safe random token."""
    return secrets.token_urlsafe(nbytes)


def hash_token(token: str) -> str:
    """SHA-256 hash used to store opaque tokens at rest."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
