"""Authentication schemas."""

import re

from pydantic import EmailStr, Field, field_validator

from app.core.sanitize import PlainText
from app.modules.shared import CamelModel
from app.modules.users.schemas import PHONE_PATTERN, AcademicLevel, UserResponse

PASSWORD_MIN_LENGTH = 8


def validate_password_strength(password: str) -> str:
    """At least 8 characters with an upper-case letter, a lower-case letter and a digit."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain an uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain a lowercase letter")
    if not re.search(r"\d", password):
        raise ValueError("Password must contain a number")
    return password


class RegisterRequest(CamelModel):
    full_name: PlainText = Field(..., min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(..., max_length=128)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    country: PlainText | None = Field(default=None, max_length=100)
    academic_level: AcademicLevel | None = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=16, max_length=256)
    password: str = Field(..., max_length=128)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password_strength(v)


class TokenResponse(CamelModel):
    token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(TokenResponse):
    """Register/login response: tokens plus the account."""

    user: UserResponse
