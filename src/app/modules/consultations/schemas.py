"""
Consultation Schemas
"""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field, field_validator

from app.core.sanitize import PlainText
from app.modules.consultations.models import (
    DEFAULT_DURATION_MINUTES,
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    ConsultationStatus,
    ConsultationType,
)
from app.modules.shared import CamelModel, PaginationMeta


def _future_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; the result must lie in the future."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    if value <= datetime.now(UTC):
        raise ValueError("Consultation time must be in the future")
    return value


class BookConsultationRequest(CamelModel):
    consultation_type: ConsultationType
    scheduled_at: datetime
    duration_minutes: int = Field(
        default=DEFAULT_DURATION_MINUTES, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES
    )
    notes: Annotated[PlainText, Field(max_length=2000)] | None = None

    @field_validator("scheduled_at")
    @classmethod
    def validate_scheduled_at(cls, v: datetime) -> datetime:
        return _future_utc(v)


class RescheduleRequest(CamelModel):
    scheduled_at: datetime

    @field_validator("scheduled_at")
    @classmethod
    def validate_scheduled_at(cls, v: datetime) -> datetime:
        return _future_utc(v)


class CancelRequest(CamelModel):
    reason: Annotated[PlainText, Field(max_length=1000)] | None = None


class ConsultationResponse(CamelModel):
    id: UUID
    consultation_type: ConsultationType
    consultant_name: str | None = None
    scheduled_at: datetime
    duration_minutes: int
    status: ConsultationStatus
    notes: str | None = None
    meeting_link: str | None = None
    cancellation_reason: str | None = None
    created_at: datetime
    updated_at: datetime


class ConsultationListResponse(CamelModel):
    consultations: list[ConsultationResponse]
    pagination: PaginationMeta
