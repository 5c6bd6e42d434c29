"""
Consultation Service Layer

Slots are global: any two active bookings may not overlap, whoever made
them. Overlap is [start, start + duration) against the same for the other
booking.
"""

import logging
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.email import send_consultation_booked_email
from app.core.errors import ConflictError, NotFoundError, ValidationFailedError
from app.core.pagination import Pagination
from app.modules.consultations import repository
from app.modules.consultations.models import (
    ACTIVE_STATUSES,
    MAX_DURATION_MINUTES,
    Consultation,
    ConsultationStatus,
)
from app.modules.consultations.schemas import (
    BookConsultationRequest,
    ConsultationListResponse,
    ConsultationResponse,
)
from app.modules.shared import PaginationMeta
from app.modules.users.models import User

logger = logging.getLogger(__name__)


class ConsultationNotFoundError(NotFoundError):
    def __init__(self, consultation_id: UUID | None = None):
        super().__init__("Consultation", consultation_id)


class SlotUnavailableError(ConflictError):
    def __init__(self):
        super().__init__("This time slot is not available", "SLOT_UNAVAILABLE")


class CannotRescheduleError(ValidationFailedError):
    def __init__(self, status: ConsultationStatus):
        super().__init__(
            f"A {status.value} consultation cannot be rescheduled", "CANNOT_RESCHEDULE"
        )


class CannotCancelError(ValidationFailedError):
    def __init__(self, status: ConsultationStatus):
        super().__init__(f"A {status.value} consultation cannot be cancelled", "CANNOT_CANCEL")


def overlaps(
    start: datetime, duration_minutes: int, other_start: datetime, other_duration_minutes: int
) -> bool:
    end = start + timedelta(minutes=duration_minutes)
    other_end = other_start + timedelta(minutes=other_duration_minutes)
    return start < other_end and other_start < end


async def ensure_slot_available(
    db: AsyncSession,
    start: datetime,
    duration_minutes: int,
    exclude_id: UUID | None = None,
) -> None:
    """
    Raises:
        SlotUnavailableError: Another active booking overlaps [start, start + duration)
    """
    # An overlapping booking must start within MAX_DURATION before our start
    candidates = await repository.find_active_starting_between(
        db,
        start - timedelta(minutes=MAX_DURATION_MINUTES),
        start + timedelta(minutes=duration_minutes),
        exclude_id=exclude_id,
    )
    for other in candidates:
        if overlaps(start, duration_minutes, other.scheduled_at, other.duration_minutes):
            logger.info(f"Slot {start.isoformat()} clashes with consultation {other.id}")
            raise SlotUnavailableError()


async def book_consultation(
    db: AsyncSession,
    user: User,
    data: BookConsultationRequest,
) -> Consultation:
    await ensure_slot_available(db, data.scheduled_at, data.duration_minutes)
    consultation = await repository.create_consultation(
        db,
        user_id=user.id,
        consultation_type=data.consultation_type,
        scheduled_at=data.scheduled_at,
        duration_minutes=data.duration_minutes,
        notes=data.notes,
    )
    logger.info(
        f"Consultation {consultation.id} booked by user {user.id} at {consultation.scheduled_at.isoformat()}"
    )
    await send_consultation_booked_email(
        user.email,
        user.full_name,
        consultation.consultation_type.value,
        consultation.scheduled_at,
        consultation.duration_minutes,
    )
    return consultation


async def list_consultations(
    db: AsyncSession,
    user_id: UUID,
    status: ConsultationStatus | None,
    pagination: Pagination,
) -> ConsultationListResponse:
    consultations, total = await repository.list_user_consultations(
        db, user_id, status, limit=pagination.limit, offset=pagination.offset
    )
    return ConsultationListResponse(
        consultations=[ConsultationResponse.model_validate(c) for c in consultations],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_consultation(db: AsyncSession, user_id: UUID, consultation_id: UUID) -> Consultation:
    consultation = await repository.get_user_consultation(db, consultation_id, user_id)
    if consultation is None:
        raise ConsultationNotFoundError(consultation_id)
    return consultation


async def reschedule_consultation(
    db: AsyncSession,
    user_id: UUID,
    consultation_id: UUID,
    scheduled_at: datetime,
) -> Consultation:
    """
    Raises:
        ConsultationNotFoundError
        CannotRescheduleError: Completed or cancelled
        SlotUnavailableError: New slot clashes with another booking
    """
    consultation = await get_consultation(db, user_id, consultation_id)
    if consultation.status not in ACTIVE_STATUSES:
        raise CannotRescheduleError(consultation.status)

    await ensure_slot_available(
        db, scheduled_at, consultation.duration_minutes, exclude_id=consultation.id
    )
    consultation.scheduled_at = scheduled_at
    consultation.status = ConsultationStatus.RESCHEDULED
    consultation = await repository.save(db, consultation)
    logger.info(f"Consultation {consultation_id} rescheduled to {scheduled_at.isoformat()}")
    return consultation


async def cancel_consultation(
    db: AsyncSession,
    user_id: UUID,
    consultation_id: UUID,
    reason: str | None = None,
) -> Consultation:
    """
    Raises:
        ConsultationNotFoundError
        CannotCancelError: Completed or already cancelled
    """
    consultation = await get_consultation(db, user_id, consultation_id)
    if consultation.status not in ACTIVE_STATUSES:
        raise CannotCancelError(consultation.status)

    consultation.status = ConsultationStatus.CANCELLED
    consultation.cancellation_reason = reason
    consultation = await repository.save(db, consultation)
    logger.info(f"Consultation {consultation_id} cancelled by user {user_id}")
    return consultation
