"""
Consultation Models
"""

import uuid
from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel

DEFAULT_DURATION_MINUTES = 30
MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 120


class ConsultationType(str, Enum):
    GENERAL = "general"
    VISA = "visa"
    SCHOLARSHIP = "scholarship"
    APPLICATION = "application"
    INTERVIEW = "interview"


class ConsultationStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    RESCHEDULED = "rescheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Bookings in these states hold their slot
ACTIVE_STATUSES = (
    ConsultationStatus.SCHEDULED,
    ConsultationStatus.CONFIRMED,
    ConsultationStatus.RESCHEDULED,
)


class Consultation(BaseModel):
    __tablename__ = "consultations"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    consultation_type: Mapped[ConsultationType] = mapped_column(
        SAEnum(ConsultationType, name="consultation_type"), nullable=False
    )
    consultant_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_DURATION_MINUTES
    )
    status: Mapped[ConsultationStatus] = mapped_column(
        SAEnum(ConsultationStatus, name="consultation_status"),
        nullable=False,
        default=ConsultationStatus.SCHEDULED,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    meeting_link: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at + timedelta(minutes=self.duration_minutes)
