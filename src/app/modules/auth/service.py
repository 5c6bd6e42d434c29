"""
Authentication Service Layer

Registration, login, token refresh and password reset.

Security considerations:
- Passwords hashed with bcrypt; failed logins give one generic error
- Reset tokens are random (secrets.token_urlsafe), stored as SHA-256 hashes,
  expire after PASSWORD_RESET_EXPIRE_MINUTES and are single-use
- forgot-password answers identically whether or not the email exists
- A paid plan past its expiry date is downgraded to free at login
"""

import logging
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.email import send_password_reset_email, send_welcome_email
from app.core.errors import AppError, AuthenticationError, ConflictError
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_secure_token,
    hash_password,
    hash_token,
    verify_password,
)
from app.modules.auth import repository
from app.modules.auth.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.helpers import calculate_profile_completion
from app.modules.users.models import User
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)


class EmailExistsError(ConflictError):
    def __init__(self):
        super().__init__("An account with this email already exists", "EMAIL_EXISTS")


class InvalidCredentialsError(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS")


class InvalidResetTokenError(AppError):
    def __init__(self):
        super().__init__(
            message="This reset link is invalid or has expired.",
            error_code="INVALID_TOKEN",
            status_code=400,
        )


def issue_tokens(user: User) -> TokenResponse:
    """Access token carries the claims the auth dependencies read."""
    claims = {
        "email": user.email,
        "role": user.role.value,
        "subscriptionType": user.current_plan.value,
    }
    return TokenResponse(
        token=create_access_token(subject=str(user.id), additional_claims=claims),
        refresh_token=create_refresh_token(subject=str(user.id)),
    )


def _auth_response(user: User) -> AuthResponse:
    tokens = issue_tokens(user)
    return AuthResponse(
        token=tokens.token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.from_user(user),
    )


async def register(db: AsyncSession, data: RegisterRequest) -> AuthResponse:
    """
    Create an account on the free plan.

    Raises:
        EmailExistsError: Email already registered (409)
    """
    if await UserRepository.email_exists(db, data.email):
        raise EmailExistsError()

    academic_level = data.academic_level.value if data.academic_level else None
    profile = {
        "full_name": data.full_name,
        "email": data.email,
        "phone": data.phone,
        "country": data.country,
        "academic_level": academic_level,
    }

    user = await UserRepository.create(
        db,
        email=data.email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        phone=data.phone,
        country=data.country,
        academic_level=academic_level,
        profile_complete=calculate_profile_completion(profile),
    )
    logger.info(f"User registered: {user.id}")

    await send_welcome_email(user.email, user.full_name)
    return _auth_response(user)


async def login(db: AsyncSession, data: LoginRequest) -> AuthResponse:
    """
    Verify credentials and issue tokens.

    Raises:
        InvalidCredentialsError: Unknown email, wrong password or inactive account
    """
    user = await UserRepository.get_by_email(db, data.email)

    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account {user.id}")
        raise InvalidCredentialsError()

    updates: dict = {"last_login_at": datetime.now(UTC)}
    if user.subscription_type != SubscriptionPlan.FREE and user.current_plan == SubscriptionPlan.FREE:
        logger.info(f"Subscription for user {user.id} expired; downgrading to free")
        updates["subscription_type"] = SubscriptionPlan.FREE

    user = await UserRepository.update(db, user, **updates)
    logger.info(f"User logged in: {user.id} (role: {user.role.value})")
    return _auth_response(user)


async def refresh(db: AsyncSession, refresh_token: str) -> TokenResponse:
    """
    Exchange a refresh token for a new token pair.

    Raises:
        AuthenticationError: Token invalid, expired, wrong type, or user gone
    """
    payload = decode_token(refresh_token)
    if payload is None or payload.get("type") != REFRESH_TOKEN_TYPE:
        raise AuthenticationError("Invalid refresh token.", "INVALID_TOKEN")

    try:
        user_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise AuthenticationError("Invalid refresh token.", "INVALID_TOKEN") from e

    user = await UserRepository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise AuthenticationError("Invalid refresh token.", "INVALID_TOKEN")

    return issue_tokens(user)


async def forgot_password(db: AsyncSession, data: ForgotPasswordRequest) -> None:
    """Create and email a reset token when the account exists. Silent otherwise."""
    user = await UserRepository.get_by_email(db, data.email)
    if user is None or not user.is_active:
        logger.info("Password reset requested for unknown email")
        return

    token = generate_secure_token()
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.password_reset_expire_minutes)
    await repository.create_reset_token(db, user.id, hash_token(token), expires_at)

    logger.info(f"Password reset token issued for user {user.id}")
    await send_password_reset_email(user.email, user.full_name, token)


async def reset_password(db: AsyncSession, data: ResetPasswordRequest) -> None:
    """
    Set a new password using a reset token.

    Raises:
        InvalidResetTokenError: Unknown, expired or already used token
    """
    reset_token = await repository.get_valid_reset_token(db, hash_token(data.token))
    if reset_token is None:
        raise InvalidResetTokenError()

    user = await UserRepository.get_by_id(db, reset_token.user_id)
    if user is None:
        raise InvalidResetTokenError()

    await repository.mark_reset_token_used(db, reset_token)
    await UserRepository.update(db, user, password_hash=hash_password(data.password))
    logger.info(f"Password reset completed for user {user.id}")
