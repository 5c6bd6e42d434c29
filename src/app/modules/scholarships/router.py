"""
Scholarship Router
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.scholarships import service
from app.modules.scholarships.schemas import (
    AutoMatchResponse,
    ScholarshipListResponse,
    ScholarshipResponse,
)
from app.modules.shared import ApiResponse
from app.modules.subscriptions.dependencies import require_subscription
from app.modules.subscriptions.plans import SubscriptionPlan
from app.modules.users.models import User

router = APIRouter()


@router.get("", response_model=ApiResponse[ScholarshipListResponse])
async def list_scholarships(
    country: str | None = Query(default=None, max_length=100),
    level: str | None = Query(default=None, max_length=50),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ScholarshipListResponse]:
    """Scholarships still accepting applications."""
    return ApiResponse(data=await service.list_scholarships(db, country, level, pagination))


@router.api_route("/auto-match", methods=["GET", "POST"], response_model=ApiResponse[AutoMatchResponse])
async def auto_match(
    account: User = Depends(require_subscription(SubscriptionPlan.GLOBAL)),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AutoMatchResponse]:
    """
    Global plan only.

    Raises:
        403 SUBSCRIPTION_REQUIRED: Caller is below the global plan
    """
    return ApiResponse(data=await service.auto_match(db, account))


@router.get("/{scholarship_id}", response_model=ApiResponse[ScholarshipResponse])
async def get_scholarship(
    scholarship_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ScholarshipResponse]:
    scholarship = await service.get_scholarship(db, scholarship_id)
    return ApiResponse(data=ScholarshipResponse.model_validate(scholarship))
