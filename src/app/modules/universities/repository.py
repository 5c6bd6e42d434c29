"""
University Repository
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.universities.models import University


@dataclass
class UniversityFilters:
    country: str | None = None
    region: str | None = None
    q: str | None = None
    min_ranking: int | None = None
    max_ranking: int | None = None
    has_scholarships: bool | None = None


def _apply_filters(query: Select, filters: UniversityFilters) -> Select:
    query = query.where(University.is_active.is_(True))
    if filters.country:
        query = query.where(func.lower(University.country) == filters.country.lower())
    if filters.region:
        query = query.where(func.lower(University.region) == filters.region.lower())
    if filters.q:
        pattern = f"%{filters.q}%"
        query = query.where(or_(University.name.ilike(pattern), University.description.ilike(pattern)))
    if filters.min_ranking is not None:
        query = query.where(University.ranking >= filters.min_ranking)
    if filters.max_ranking is not None:
        query = query.where(University.ranking <= filters.max_ranking)
    if filters.has_scholarships:
        query = query.where(University.has_scholarships.is_(True))
    return query


async def search_universities(
    db: AsyncSession,
    filters: UniversityFilters,
    limit: int,
    offset: int,
) -> tuple[list[University], int]:
    """Ranked universities matching the filters, unranked last."""
    total = (
        await db.execute(_apply_filters(select(func.count()).select_from(University), filters))
    ).scalar_one()
    result = await db.execute(
        _apply_filters(select(University), filters)
        .order_by(University.ranking.asc().nulls_last(), University.name)
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


async def get_university(db: AsyncSession, university_id: UUID) -> University | None:
    result = await db.execute(
        select(University).where(University.id == university_id, University.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def list_countries(db: AsyncSession) -> list[str]:
    result = await db.execute(
        select(University.country)
        .where(University.is_active.is_(True))
        .distinct()
        .order_by(University.country)
    )
    return list(result.scalars().all())
