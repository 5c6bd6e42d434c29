"""
Program Router
"""

from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.programs import service
from app.modules.programs.models import DegreeLevel
from app.modules.programs.repository import ProgramFilters
from app.modules.programs.schemas import (
    ProgramDetailResponse,
    ProgramListResponse,
    RequirementsResponse,
)
from app.modules.shared import ApiResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[ProgramListResponse])
async def list_programs(
    level: DegreeLevel | None = Query(default=None),
    university_id: UUID | None = Query(default=None, alias="universityId"),
    q: str | None = Query(default=None, max_length=100),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProgramListResponse]:
    filters = ProgramFilters(
        q=q,
        level=level.value if level else None,
        university_id=university_id,
    )
    return ApiResponse(data=await service.list_programs(db, filters, pagination))


@router.get("/search", response_model=ApiResponse[ProgramListResponse])
async def search_programs(
    field: str | None = Query(default=None, max_length=100),
    degree_level: DegreeLevel | None = Query(default=None, alias="degreeLevel"),
    country: str | None = Query(default=None, max_length=100),
    min_fee: Decimal | None = Query(default=None, ge=0, alias="minFee"),
    max_fee: Decimal | None = Query(default=None, ge=0, alias="maxFee"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProgramListResponse]:
    """Cheapest first."""
    filters = ProgramFilters(
        field=field,
        level=degree_level.value if degree_level else None,
        country=country,
        min_fee=min_fee,
        max_fee=max_fee,
    )
    return ApiResponse(data=await service.list_programs(db, filters, pagination, order_by_fee=True))


@router.get("/{program_id}", response_model=ApiResponse[ProgramDetailResponse])
async def get_program(
    program_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ProgramDetailResponse]:
    return ApiResponse(data=await service.get_program_detail(db, program_id))


@router.get("/{program_id}/requirements", response_model=ApiResponse[RequirementsResponse])
async def get_requirements(
    program_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[RequirementsResponse]:
    return ApiResponse(data=await service.get_requirements(db, program_id))
