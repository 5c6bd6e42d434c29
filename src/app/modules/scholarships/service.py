"""
Scholarship Service Layer
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.core.pagination import Pagination
from app.modules.scholarships import repository
from app.modules.scholarships.helpers import rank_matches
from app.modules.scholarships.models import Scholarship
from app.modules.scholarships.schemas import (
    AutoMatchResponse,
    ScholarshipListResponse,
    ScholarshipMatchResponse,
    ScholarshipResponse,
)
from app.modules.shared import PaginationMeta
from app.modules.users.models import User

logger = logging.getLogger(__name__)


class ScholarshipNotFoundError(NotFoundError):
    def __init__(self, scholarship_id: UUID | None = None):
        super().__init__("Scholarship", scholarship_id)


async def list_scholarships(
    db: AsyncSession,
    country: str | None,
    level: str | None,
    pagination: Pagination,
) -> ScholarshipListResponse:
    scholarships, total = await repository.list_open_scholarships(
        db, country=country, level=level, limit=pagination.limit, offset=pagination.offset
    )
    return ScholarshipListResponse(
        scholarships=[ScholarshipResponse.model_validate(s) for s in scholarships],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_scholarship(db: AsyncSession, scholarship_id: UUID) -> Scholarship:
    scholarship = await repository.get_scholarship(db, scholarship_id)
    if scholarship is None:
        raise ScholarshipNotFoundError(scholarship_id)
    return scholarship


async def auto_match(db: AsyncSession, user: User) -> AutoMatchResponse:
    """Top matches for the user's country and academic level."""
    candidates = await repository.find_match_candidates(db, user.country, user.academic_level)
    matches = rank_matches(candidates, user.country, user.academic_level)
    logger.info(f"Auto-match for user {user.id}: {len(candidates)} candidates, {len(matches)} returned")
    return AutoMatchResponse(
        matches=[
            ScholarshipMatchResponse(
                scholarship=ScholarshipResponse.model_validate(m.scholarship),
                match_score=m.score,
                reasons=m.reasons,
            )
            for m in matches
        ],
        profile_complete=bool(user.country and user.academic_level),
    )
