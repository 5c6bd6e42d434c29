"""
Scholarship Repository
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.scholarships.models import GLOBAL_COUNTRY, Scholarship


def _open_on(today: date):
    return (
        Scholarship.is_active.is_(True),
        or_(Scholarship.deadline.is_(None), Scholarship.deadline >= today),
    )


async def list_open_scholarships(
    db: AsyncSession,
    *,
    country: str | None = None,
    level: str | None = None,
    limit: int = 20,
    offset: int = 0,
    today: date | None = None,
) -> tuple[list[Scholarship], int]:
    """Scholarships whose deadline has not passed, soonest deadline first."""
    conditions = list(_open_on(today or date.today()))
    if country:
        conditions.append(func.lower(Scholarship.country) == country.lower())
    if level:
        conditions.append(func.lower(Scholarship.level) == level.lower())

    total = (
        await db.execute(select(func.count(Scholarship.id)).where(*conditions))
    ).scalar_one()
    result = await db.execute(
        select(Scholarship)
        .where(*conditions)
        .order_by(Scholarship.deadline.asc().nulls_last(), Scholarship.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


async def get_scholarship(db: AsyncSession, scholarship_id: UUID) -> Scholarship | None:
    result = await db.execute(
        select(Scholarship).where(Scholarship.id == scholarship_id, Scholarship.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def find_match_candidates(
    db: AsyncSession,
    country: str | None,
    academic_level: str | None,
    today: date | None = None,
    limit: int = 20,
) -> list[Scholarship]:
    """Open scholarships for the student's country (or global) and level (or any level)."""
    conditions = list(_open_on(today or date.today()))
    if country:
        conditions.append(
            or_(
                func.lower(Scholarship.country) == country.lower(),
                Scholarship.country == GLOBAL_COUNTRY,
            )
        )
    if academic_level:
        conditions.append(
            or_(func.lower(Scholarship.level) == academic_level.lower(), Scholarship.level.is_(None))
        )
    result = await db.execute(
        select(Scholarship)
        .where(*conditions)
        .order_by(Scholarship.deadline.asc().nulls_last())
        .limit(limit)
    )
    return list(result.scalars().all())
