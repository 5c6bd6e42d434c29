"""
Application Admin Router

Endpoints:
- GET /admin/applications - All applications, optional status filter
- PATCH /admin/applications/{id}/status - Move an application to a new status
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_admin
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.applications import service
from app.modules.applications.models import ApplicationStatus
from app.modules.applications.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    UpdateStatusRequest,
)
from app.modules.shared import ApiResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[ApplicationListResponse])
async def list_applications(
    status_filter: ApplicationStatus | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ApplicationListResponse]:
    return ApiResponse(data=await service.list_all_applications(db, status_filter, pagination))


@router.patch("/{application_id}/status", response_model=ApiResponse[ApplicationResponse])
async def update_application_status(
    application_id: UUID,
    data: UpdateStatusRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ApplicationResponse]:
    """
    Raises:
        404 APPLICATION_NOT_FOUND
        400 INVALID_STATUS_TRANSITION
    """
    application = await service.update_status(db, admin, application_id, data.status, data.notes)
    return ApiResponse(
        data=ApplicationResponse.from_application(application),
        message=f"Application status updated to {application.status.value}",
    )
