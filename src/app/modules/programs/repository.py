"""
Program Repository
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.programs.models import Program
from app.modules.universities.models import University


@dataclass
class ProgramFilters:
    q: str | None = None
    field: str | None = None
    level: str | None = None
    university_id: UUID | None = None
    country: str | None = None
    min_fee: Decimal | None = None
    max_fee: Decimal | None = None


def _apply_filters(query: Select, filters: ProgramFilters) -> Select:
    query = query.join(University, Program.university_id == University.id).where(
        Program.is_active.is_(True),
        University.is_active.is_(True),
    )
    if filters.q:
        pattern = f"%{filters.q}%"
        query = query.where(or_(Program.name.ilike(pattern), Program.requirements.ilike(pattern)))
    if filters.field:
        pattern = f"%{filters.field}%"
        query = query.where(or_(Program.name.ilike(pattern), Program.field.ilike(pattern)))
    if filters.level:
        query = query.where(func.lower(Program.level) == filters.level.lower())
    if filters.university_id:
        query = query.where(Program.university_id == filters.university_id)
    if filters.country:
        query = query.where(func.lower(University.country) == filters.country.lower())
    if filters.min_fee is not None:
        query = query.where(Program.tuition_fee >= filters.min_fee)
    if filters.max_fee is not None:
        query = query.where(Program.tuition_fee <= filters.max_fee)
    return query


async def find_programs(
    db: AsyncSession,
    filters: ProgramFilters,
    limit: int,
    offset: int,
    order_by_fee: bool = False,
) -> tuple[list[Program], int]:
    """Matching programs; newest first, or cheapest first for fee searches."""
    total = (
        await db.execute(_apply_filters(select(func.count(Program.id)).select_from(Program), filters))
    ).scalar_one()

    order = (
        (Program.tuition_fee.asc().nulls_last(), Program.name)
        if order_by_fee
        else (Program.created_at.desc(),)
    )
    result = await db.execute(
        _apply_filters(select(Program), filters).order_by(*order).limit(limit).offset(offset)
    )
    return list(result.scalars().unique().all()), total


async def get_program(db: AsyncSession, program_id: UUID) -> Program | None:
    result = await db.execute(
        select(Program).where(Program.id == program_id, Program.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def list_for_university(db: AsyncSession, university_id: UUID) -> list[Program]:
    result = await db.execute(
        select(Program)
        .where(Program.university_id == university_id, Program.is_active.is_(True))
        .order_by(Program.name)
    )
    return list(result.scalars().unique().all())
