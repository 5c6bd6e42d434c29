"""
User Schemas

Profile and document request/response models.
"""

import enum
from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.sanitize import PlainText
from app.modules.shared import CamelModel
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.models import User, UserRole

PHONE_PATTERN = r"^\+?[0-9\s\-()]{6,20}$"


class AcademicLevel(str, enum.Enum):
    HIGH_SCHOOL = "high_school"
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"
    DIPLOMA = "diploma"
    OTHER = "other"


class DocumentType(str, enum.Enum):
    CV = "cv"
    TRANSCRIPT = "transcript"
    PASSPORT = "passport"
    CERTIFICATE = "certificate"
    RECOMMENDATION = "recommendation"
    SOP = "sop"
    LANGUAGE_TEST = "language_test"
    OTHER = "other"


class UserResponse(CamelModel):
    """Public view of an account."""

    id: UUID
    full_name: str
    email: EmailStr
    phone: str | None = None
    country: str | None = None
    academic_level: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    bio: str | None = None
    role: UserRole
    subscription_type: SubscriptionPlan
    subscription_expires_at: datetime | None = None
    free_applications_used: int = 0
    profile_complete: int = 0
    member_since: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        """Build from the ORM model, reporting the plan currently in force."""
        return cls(
            id=user.id,
            full_name=user.full_name,
            email=user.email,
            phone=user.phone,
            country=user.country,
            academic_level=user.academic_level,
            address=user.address,
            date_of_birth=user.date_of_birth,
            bio=user.bio,
            role=user.role,
            subscription_type=user.current_plan,
            subscription_expires_at=user.subscription_expires_at,
            free_applications_used=user.free_applications_used,
            profile_complete=user.profile_complete,
            member_since=user.created_at,
        )


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; only fields sent are changed."""

    full_name: PlainText | None = Field(default=None, min_length=2, max_length=255)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    country: PlainText | None = Field(default=None, max_length=100)
    academic_level: AcademicLevel | None = None
    address: PlainText | None = Field(default=None, max_length=500)
    date_of_birth: date | None = None
    bio: PlainText | None = Field(default=None, max_length=2000)

    @field_validator("date_of_birth")
    @classmethod
    def validate_date_of_birth(cls, v: date | None) -> date | None:
        if v is not None and v >= date.today():
            raise ValueError("Date of birth must be in the past")
        return v


class DocumentResponse(CamelModel):
    id: UUID
    document_type: str
    file_url: str
    file_name: str
    file_size: int
    content_type: str
    uploaded_at: datetime


class DocumentListResponse(CamelModel):
    documents: list[DocumentResponse]
