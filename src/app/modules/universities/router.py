"""
University Router
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.shared import ApiResponse
from app.modules.subscriptions.dependencies import get_optional_plan
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.universities import service
from app.modules.universities.repository import UniversityFilters
from app.modules.universities.schemas import (
    CountryListResponse,
    UniversityDetailResponse,
    UniversitySearchResponse,
)

router = APIRouter()


@router.get("/search", response_model=ApiResponse[UniversitySearchResponse])
async def search_universities(
    country: str | None = Query(default=None, max_length=100),
    region: str | None = Query(default=None, max_length=50),
    q: str | None = Query(default=None, max_length=100),
    min_ranking: int | None = Query(default=None, ge=1, alias="minRanking"),
    max_ranking: int | None = Query(default=None, ge=1, alias="maxRanking"),
    has_scholarships: bool | None = Query(default=None, alias="hasScholarships"),
    pagination: Pagination = Depends(get_pagination),
    plan: SubscriptionPlan = Depends(get_optional_plan),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UniversitySearchResponse]:
    """Anonymous callers are treated as free tier."""
    filters = UniversityFilters(
        country=country,
        region=region,
        q=q,
        min_ranking=min_ranking,
        max_ranking=max_ranking,
        has_scholarships=has_scholarships,
    )
    return ApiResponse(data=await service.search_universities(db, filters, pagination, plan))


@router.get("/filters/countries", response_model=ApiResponse[CountryListResponse])
async def list_countries(db: AsyncSession = Depends(get_db)) -> ApiResponse[CountryListResponse]:
    return ApiResponse(data=CountryListResponse(countries=await service.list_countries(db)))


@router.get("/{university_id}", response_model=ApiResponse[UniversityDetailResponse])
async def get_university(
    university_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UniversityDetailResponse]:
    """
    Raises:
        404 UNIVERSITY_NOT_FOUND
    """
    return ApiResponse(data=await service.get_university_detail(db, university_id))
