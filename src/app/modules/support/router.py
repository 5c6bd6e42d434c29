"""
Support Router

Admins act as staff: they can read and answer every ticket.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.shared import ApiResponse
from app.modules.subscriptions.dependencies import get_current_account
from app.modules.support import service
from app.modules.support.models import TicketStatus
from app.modules.support.schemas import (
    CreateTicketRequest,
    ReplyRequest,
    TicketDetailResponse,
    TicketListResponse,
    TicketMessageResponse,
    TicketResponse,
)
from app.modules.users.models import User

router = APIRouter()


@router.post(
    "/tickets",
    response_model=ApiResponse[TicketResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_ticket(
    data: CreateTicketRequest,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TicketResponse]:
    ticket = await service.create_ticket(db, account.id, account.current_plan, data)
    return ApiResponse(
        data=TicketResponse.model_validate(ticket),
        message="Support ticket created successfully",
    )


@router.get("/tickets", response_model=ApiResponse[TicketListResponse])
async def list_tickets(
    status_filter: TicketStatus | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TicketListResponse]:
    return ApiResponse(data=await service.list_tickets(db, user, status_filter, pagination))


@router.get("/tickets/{ticket_id}", response_model=ApiResponse[TicketDetailResponse])
async def get_ticket(
    ticket_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TicketDetailResponse]:
    return ApiResponse(data=await service.get_ticket_detail(db, user, ticket_id))


@router.post(
    "/tickets/{ticket_id}/reply",
    response_model=ApiResponse[TicketMessageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def reply(
    ticket_id: UUID,
    data: ReplyRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TicketMessageResponse]:
    """
    Raises:
        400 TICKET_CLOSED
    """
    message = await service.reply(db, user, ticket_id, data.message)
    return ApiResponse(data=TicketMessageResponse.from_message(message), message="Reply sent successfully")


@router.api_route(
    "/tickets/{ticket_id}/close",
    methods=["PUT", "POST"],
    response_model=ApiResponse[TicketResponse],
)
async def close_ticket(
    ticket_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[TicketResponse]:
    """
    Raises:
        400 ALREADY_CLOSED
    """
    ticket = await service.close_ticket(db, user, ticket_id)
    return ApiResponse(data=TicketResponse.model_validate(ticket), message="Ticket closed successfully")
