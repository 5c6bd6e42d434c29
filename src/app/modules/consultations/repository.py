"""
Consultation Repository
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.consultations.models import (
    ACTIVE_STATUSES,
    Consultation,
    ConsultationStatus,
    ConsultationType,
)


async def create_consultation(
    db: AsyncSession,
    *,
    user_id: UUID,
    consultation_type: ConsultationType,
    scheduled_at: datetime,
    duration_minutes: int,
    notes: str | None,
) -> Consultation:
    consultation = Consultation(
        user_id=user_id,
        consultation_type=consultation_type,
        scheduled_at=scheduled_at,
        duration_minutes=duration_minutes,
        notes=notes,
        status=ConsultationStatus.SCHEDULED,
    )
    db.add(consultation)
    await db.commit()
    await db.refresh(consultation)
    return consultation


async def find_active_starting_between(
    db: AsyncSession,
    window_start: datetime,
    window_end: datetime,
    exclude_id: UUID | None = None,
) -> list[Consultation]:
    """Active bookings whose start falls in [window_start, window_end)."""
    query = select(Consultation).where(
        Consultation.status.in_(ACTIVE_STATUSES),
        Consultation.scheduled_at >= window_start,
        Consultation.scheduled_at < window_end,
    )
    if exclude_id is not None:
        query = query.where(Consultation.id != exclude_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_user_consultation(
    db: AsyncSession, consultation_id: UUID, user_id: UUID
) -> Consultation | None:
    result = await db.execute(
        select(Consultation).where(
            Consultation.id == consultation_id, Consultation.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def list_user_consultations(
    db: AsyncSession,
    user_id: UUID,
    status: ConsultationStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Consultation], int]:
    conditions = [Consultation.user_id == user_id]
    if status is not None:
        conditions.append(Consultation.status == status)

    total = (await db.execute(select(func.count(Consultation.id)).where(*conditions))).scalar_one()
    result = await db.execute(
        select(Consultation)
        .where(*conditions)
        .order_by(Consultation.scheduled_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


async def save(db: AsyncSession, consultation: Consultation) -> Consultation:
    await db.commit()
    await db.refresh(consultation)
    return consultation
