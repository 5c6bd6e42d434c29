"""
Application Router

Student-facing endpoints. Every route requires authentication and only ever
shows the caller's own applications.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.applications import service
from app.modules.applications.models import ApplicationStatus
from app.modules.applications.schemas import (
    ApplicationDetailResponse,
    ApplicationListResponse,
    ApplicationResponse,
    CreateApplicationRequest,
)
from app.modules.shared import ApiResponse
from app.modules.subscriptions.dependencies import get_current_account
from app.modules.users.models import User

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ApplicationDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
async def submit_application(
    data: CreateApplicationRequest,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ApplicationDetailResponse]:
    """
    Raises:
        403 APPLICATION_LIMIT_REACHED: Plan allowance used up
        404 UNIVERSITY_NOT_FOUND / PROGRAM_NOT_FOUND
        400 PROGRAM_MISMATCH: Program not offered by the university
        409 DUPLICATE_APPLICATION: Open application for the same program
    """
    application = await service.submit_application(db, account, data)
    return ApiResponse(
        data=ApplicationDetailResponse.from_application(application),
        message="Application submitted successfully",
    )


@router.get("", response_model=ApiResponse[ApplicationListResponse])
async def list_applications(
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ApplicationListResponse]:
    return ApiResponse(
        data=await service.list_user_applications(db, user.id, status_filter, pagination)
    )


@router.get("/{application_id}", response_model=ApiResponse[ApplicationDetailResponse])
async def get_application(
    application_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ApplicationDetailResponse]:
    application = await service.get_user_application(db, user.id, application_id)
    return ApiResponse(data=ApplicationDetailResponse.from_application(application))


@router.patch("/{application_id}/withdraw", response_model=ApiResponse[ApplicationResponse])
async def withdraw_application(
    application_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ApplicationResponse]:
    """
    Raises:
        400 INVALID_STATUS_TRANSITION: Already decided or withdrawn
    """
    application = await service.withdraw_application(db, user.id, application_id)
    return ApiResponse(
        data=ApplicationResponse.from_application(application),
        message="Application withdrawn",
    )
