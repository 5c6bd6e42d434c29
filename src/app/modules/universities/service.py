"""
University Service Layer

Search applies the free-tier cap: anonymous and free users see at most
FREE_TIER_SEARCH_LIMIT results per page, with an upgrade notice.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.core.pagination import Pagination
from app.modules.programs import repository as program_repository
from app.modules.programs.schemas import ProgramSummary
from app.modules.shared import PaginationMeta
from app.modules.subscriptions.plans import FREE_TIER_SEARCH_LIMIT, SubscriptionPlan
from app.modules.universities import repository
from app.modules.universities.repository import UniversityFilters
from app.modules.universities.schemas import (
    UniversityDetailResponse,
    UniversityResponse,
    UniversitySearchResponse,
)

FREE_TIER_NOTICE = "Limited results for free tier. Upgrade to see more universities."


class UniversityNotFoundError(NotFoundError):
    def __init__(self, university_id: UUID | None = None):
        super().__init__("University", university_id)


async def search_universities(
    db: AsyncSession,
    filters: UniversityFilters,
    pagination: Pagination,
    plan: SubscriptionPlan,
) -> UniversitySearchResponse:
    limited = plan is SubscriptionPlan.FREE
    limit = min(pagination.limit, FREE_TIER_SEARCH_LIMIT) if limited else pagination.limit
    offset = (pagination.page - 1) * limit

    universities, total = await repository.search_universities(db, filters, limit, offset)
    return UniversitySearchResponse(
        universities=[UniversityResponse.model_validate(u) for u in universities],
        pagination=PaginationMeta.build(pagination.page, limit, total),
        notice=FREE_TIER_NOTICE if limited else None,
    )


async def get_university_detail(db: AsyncSession, university_id: UUID) -> UniversityDetailResponse:
    university = await repository.get_university(db, university_id)
    if university is None:
        raise UniversityNotFoundError(university_id)

    programs = await program_repository.list_for_university(db, university_id)
    detail = UniversityDetailResponse.model_validate(university)
    detail.programs = [ProgramSummary.model_validate(p) for p in programs]
    return detail


async def list_countries(db: AsyncSession) -> list[str]:
    return await repository.list_countries(db)
