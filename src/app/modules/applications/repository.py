"""
Application Repository

Data access for applications. Writes commit unless noted.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.applications.models import OPEN_STATUSES, Application, ApplicationStatus


async def create_application(
    db: AsyncSession,
    *,
    user_id: UUID,
    university_id: UUID,
    program_id: UUID,
    personal_statement: str | None = None,
    notes: str | None = None,
    documents: list[dict[str, Any]] | None = None,
) -> Application:
    """Add a submitted application to the session. Caller commits."""
    application = Application(
        user_id=user_id,
        university_id=university_id,
        program_id=program_id,
        status=ApplicationStatus.SUBMITTED,
        personal_statement=personal_statement,
        notes=notes,
        documents=documents or [],
        submitted_at=datetime.now(UTC),
    )
    db.add(application)
    await db.flush()
    return application


async def count_counted_applications(db: AsyncSession, user_id: UUID) -> int:
    """Applications that count against the plan limit (everything but withdrawals)."""
    result = await db.execute(
        select(func.count(Application.id)).where(
            Application.user_id == user_id,
            Application.status != ApplicationStatus.WITHDRAWN,
        )
    )
    return result.scalar_one()


async def has_open_application(db: AsyncSession, user_id: UUID, program_id: UUID) -> bool:
    result = await db.execute(
        select(Application.id)
        .where(
            Application.user_id == user_id,
            Application.program_id == program_id,
            Application.status.in_(OPEN_STATUSES),
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_application(db: AsyncSession, application_id: UUID) -> Application | None:
    result = await db.execute(select(Application).where(Application.id == application_id))
    return result.scalar_one_or_none()


async def get_user_application(
    db: AsyncSession, application_id: UUID, user_id: UUID
) -> Application | None:
    result = await db.execute(
        select(Application).where(Application.id == application_id, Application.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_applications(
    db: AsyncSession,
    *,
    user_id: UUID | None = None,
    status: ApplicationStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Application], int]:
    """Newest first. `user_id=None` lists every user's applications (admin)."""
    conditions = []
    if user_id is not None:
        conditions.append(Application.user_id == user_id)
    if status is not None:
        conditions.append(Application.status == status)

    total = (
        await db.execute(select(func.count(Application.id)).where(*conditions))
    ).scalar_one()
    result = await db.execute(
        select(Application)
        .where(*conditions)
        .order_by(Application.submitted_at.desc().nulls_last(), Application.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().unique().all()), total


async def set_status(
    db: AsyncSession,
    application: Application,
    status: ApplicationStatus,
    notes: str | None = None,
) -> Application:
    application.status = status
    if status in (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED):
        application.decided_at = datetime.now(UTC)
    if status == ApplicationStatus.SUBMITTED and application.submitted_at is None:
        application.submitted_at = datetime.now(UTC)
    if notes is not None:
        application.notes = notes
    await db.commit()
    await db.refresh(application)
    return application
