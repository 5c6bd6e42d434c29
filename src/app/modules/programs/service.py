"""
Program Service Layer
"""

import re
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationFailedError
from app.core.pagination import Pagination
from app.modules.programs import repository
from app.modules.programs.models import Program
from app.modules.programs.repository import ProgramFilters
from app.modules.programs.schemas import (
    ProgramDetailResponse,
    ProgramListResponse,
    ProgramResponse,
    RequirementsResponse,
)
from app.modules.shared import PaginationMeta


class ProgramNotFoundError(NotFoundError):
    def __init__(self, program_id: UUID | None = None):
        super().__init__("Program", program_id)


def _to_response(program: Program) -> ProgramResponse:
    return ProgramResponse(
        id=program.id,
        name=program.name,
        field=program.field,
        level=program.level,
        duration=program.duration,
        tuition_fee=program.tuition_fee,
        language=program.language,
        intake=program.intake,
        requirements=program.requirements,
        university_id=program.university_id,
        university_name=program.university.name,
        university_country=program.university.country,
    )


def split_requirements(requirements: str | None) -> list[str]:
    """Requirements are stored as free text separated by commas, semicolons or new lines."""
    if not requirements:
        return []
    return [part.strip() for part in re.split(r"[,;\n]", requirements) if part.strip()]


async def list_programs(
    db: AsyncSession,
    filters: ProgramFilters,
    pagination: Pagination,
    order_by_fee: bool = False,
) -> ProgramListResponse:
    """
    Raises:
        ValidationFailedError: min_fee greater than max_fee
    """
    if (
        filters.min_fee is not None
        and filters.max_fee is not None
        and filters.min_fee > filters.max_fee
    ):
        raise ValidationFailedError("minFee cannot be greater than maxFee", "INVALID_FEE_RANGE")

    programs, total = await repository.find_programs(
        db, filters, pagination.limit, pagination.offset, order_by_fee=order_by_fee
    )
    return ProgramListResponse(
        programs=[_to_response(p) for p in programs],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_program_or_404(db: AsyncSession, program_id: UUID) -> Program:
    program = await repository.get_program(db, program_id)
    if program is None:
        raise ProgramNotFoundError(program_id)
    return program


async def get_program_detail(db: AsyncSession, program_id: UUID) -> ProgramDetailResponse:
    program = await get_program_or_404(db, program_id)
    return ProgramDetailResponse.model_validate(program)


async def get_requirements(db: AsyncSession, program_id: UUID) -> RequirementsResponse:
    program = await get_program_or_404(db, program_id)
    return RequirementsResponse(
        program_id=program.id,
        program_name=program.name,
        university_name=program.university.name,
        level=program.level,
        requirements=split_requirements(program.requirements),
    )
