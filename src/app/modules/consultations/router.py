"""
Consultation Router
"""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.consultations import service
from app.modules.consultations.models import ConsultationStatus
from app.modules.consultations.schemas import (
    BookConsultationRequest,
    CancelRequest,
    ConsultationListResponse,
    ConsultationResponse,
    RescheduleRequest,
)
from app.modules.shared import ApiResponse
from app.modules.subscriptions.dependencies import get_current_account
from app.modules.users.models import User

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ConsultationResponse],
    status_code=status.HTTP_201_CREATED,
)
@router.post(
    "/book",
    response_model=ApiResponse[ConsultationResponse],
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def book_consultation(
    data: BookConsultationRequest,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConsultationResponse]:
    """
    Raises:
        400 VALIDATION_ERROR: Time in the past or duration out of range
        409 SLOT_UNAVAILABLE: Overlaps another booking
    """
    consultation = await service.book_consultation(db, account, data)
    return ApiResponse(
        data=ConsultationResponse.model_validate(consultation),
        message="Consultation booked successfully",
    )


@router.get("", response_model=ApiResponse[ConsultationListResponse])
async def list_consultations(
    status_filter: ConsultationStatus | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConsultationListResponse]:
    return ApiResponse(data=await service.list_consultations(db, user.id, status_filter, pagination))


@router.get("/{consultation_id}", response_model=ApiResponse[ConsultationResponse])
async def get_consultation(
    consultation_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConsultationResponse]:
    consultation = await service.get_consultation(db, user.id, consultation_id)
    return ApiResponse(data=ConsultationResponse.model_validate(consultation))


@router.put("/{consultation_id}/reschedule", response_model=ApiResponse[ConsultationResponse])
async def reschedule_consultation(
    consultation_id: UUID,
    data: RescheduleRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConsultationResponse]:
    consultation = await service.reschedule_consultation(
        db, user.id, consultation_id, data.scheduled_at
    )
    return ApiResponse(
        data=ConsultationResponse.model_validate(consultation),
        message="Consultation rescheduled successfully",
    )


@router.api_route(
    "/{consultation_id}/cancel",
    methods=["PUT", "DELETE"],
    response_model=ApiResponse[ConsultationResponse],
)
async def cancel_consultation(
    consultation_id: UUID,
    data: CancelRequest | None = Body(default=None),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConsultationResponse]:
    """
    Raises:
        400 CANNOT_CANCEL: Completed or already cancelled
    """
    consultation = await service.cancel_consultation(
        db, user.id, consultation_id, data.reason if data else None
    )
    return ApiResponse(
        data=ConsultationResponse.model_validate(consultation),
        message="Consultation cancelled successfully",
    )
