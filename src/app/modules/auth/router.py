"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.rate_limit import rate_limit
from app.modules.auth import service
from app.modules.auth.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from app.modules.shared import ApiResponse, MessageResponse
from app.modules.users import service as user_service
from app.modules.users.schemas import ProfileUpdateRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account exists with this email, a password reset link has been sent."


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit(scope="register"))],
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuthResponse]:
    """
    Create a new account.

    Raises:
        409 EMAIL_EXISTS: Email already registered
    """
    return ApiResponse(data=await service.register(db, data), message="Registration successful")


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    dependencies=[Depends(rate_limit(scope="login"))],
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuthResponse]:
    """
    Authenticate and return JWT tokens.

    Raises:
        401 INVALID_CREDENTIALS: Wrong email/password or inactive account
    """
    return ApiResponse(data=await service.login(db, credentials), message="Login successful")


@router.post("/logout", response_model=ApiResponse[MessageResponse])
async def logout(user: CurrentUser = Depends(get_current_user)) -> ApiResponse[MessageResponse]:
    """Tokens are stateless; the client discards them."""
    logger.info(f"User logged out: {user.id}")
    return ApiResponse(data=MessageResponse(message="Logged out successfully"))


@router.post("/refresh", response_model=ApiResponse[TokenResponse])
async def refresh(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TokenResponse]:
    return ApiResponse(data=await service.refresh(db, data.refresh_token))


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    account = await user_service.get_user_or_404(db, user.id)
    return ApiResponse(data=UserResponse.from_user(account))


@router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    data: ProfileUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    account = await user_service.update_profile(db, user.id, data)
    return ApiResponse(data=UserResponse.from_user(account), message="Profile updated successfully")


@router.post(
    "/forgot-password",
    response_model=ApiResponse[MessageResponse],
    dependencies=[Depends(rate_limit(scope="forgot-password"))],
)
async def forgot_password(
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    """Same response whether or not the account exists."""
    await service.forgot_password(db, data)
    return ApiResponse(data=MessageResponse(message=FORGOT_PASSWORD_MESSAGE))


@router.post("/reset-password", response_model=ApiResponse[MessageResponse])
async def reset_password(
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    """
    Raises:
        400 INVALID_TOKEN: Unknown, expired or used token
    """
    await service.reset_password(db, data)
    return ApiResponse(data=MessageResponse(message="Password has been reset successfully"))
