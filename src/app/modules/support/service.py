"""
Support Service Layer

Status flow: a staff reply marks the ticket answered, a student reply to an
answered ticket puts it back to waiting. Closed tickets take no replies.
Global subscribers get premium support: their tickets are never below HIGH.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.errors import NotFoundError, ValidationFailedError
from app.core.pagination import Pagination
from app.modules.shared import PaginationMeta
from app.modules.subscriptions.plans import SubscriptionPlan, get_subscription_features
from app.modules.support import repository
from app.modules.support.models import (
    PRIORITY_ORDER,
    SupportMessage,
    SupportTicket,
    TicketPriority,
    TicketStatus,
)
from app.modules.support.schemas import (
    CreateTicketRequest,
    TicketDetailResponse,
    TicketListResponse,
    TicketMessageResponse,
    TicketResponse,
)

logger = logging.getLogger(__name__)


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: UUID | None = None):
        super().__init__("Ticket", ticket_id)


class TicketClosedError(ValidationFailedError):
    def __init__(self):
        super().__init__("Cannot reply to a closed ticket", "TICKET_CLOSED")


class AlreadyClosedError(ValidationFailedError):
    def __init__(self):
        super().__init__("Ticket is already closed", "ALREADY_CLOSED")


def effective_priority(requested: TicketPriority, plan: SubscriptionPlan) -> TicketPriority:
    """Premium support raises the requested priority to at least HIGH."""
    if not get_subscription_features(plan).premium_support:
        return requested
    return max(requested, TicketPriority.HIGH, key=PRIORITY_ORDER.index)


async def create_ticket(
    db: AsyncSession,
    user_id: UUID,
    plan: SubscriptionPlan,
    data: CreateTicketRequest,
) -> SupportTicket:
    ticket = await repository.create_ticket(
        db,
        user_id=user_id,
        subject=data.subject,
        category=data.category,
        priority=effective_priority(data.priority, plan),
    )
    await repository.add_message(db, ticket, user_id, data.message)
    await db.commit()
    await db.refresh(ticket)
    logger.info(f"Support ticket {ticket.id} opened by user {user_id} ({ticket.priority.value})")
    return ticket


async def list_tickets(
    db: AsyncSession,
    user: CurrentUser,
    status: TicketStatus | None,
    pagination: Pagination,
) -> TicketListResponse:
    """Students see their own tickets; staff see every ticket."""
    tickets, total = await repository.list_tickets(
        db,
        None if user.is_admin else user.id,
        status,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return TicketListResponse(
        tickets=[TicketResponse.model_validate(t) for t in tickets],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_ticket(db: AsyncSession, user: CurrentUser, ticket_id: UUID) -> SupportTicket:
    ticket = await repository.get_ticket(db, ticket_id, None if user.is_admin else user.id)
    if ticket is None:
        raise TicketNotFoundError(ticket_id)
    return ticket


async def get_ticket_detail(db: AsyncSession, user: CurrentUser, ticket_id: UUID) -> TicketDetailResponse:
    ticket = await get_ticket(db, user, ticket_id)
    messages = await repository.list_messages(db, ticket.id)
    return TicketDetailResponse(
        **TicketResponse.model_validate(ticket).model_dump(),
        messages=[TicketMessageResponse.from_message(m) for m in messages],
    )


async def reply(
    db: AsyncSession,
    user: CurrentUser,
    ticket_id: UUID,
    message: str,
) -> SupportMessage:
    """
    Raises:
        TicketNotFoundError: Unknown, or not the caller's (students)
        TicketClosedError: Ticket is closed
    """
    ticket = await get_ticket(db, user, ticket_id)
    if ticket.status == TicketStatus.CLOSED:
        raise TicketClosedError()

    is_staff = user.is_admin and ticket.user_id != user.id
    support_message = await repository.add_message(db, ticket, user.id, message, is_staff=is_staff)
    if is_staff:
        ticket.status = TicketStatus.ANSWERED
    elif ticket.status == TicketStatus.ANSWERED:
        ticket.status = TicketStatus.WAITING
    await db.commit()
    await db.refresh(support_message)
    logger.info(f"Reply on ticket {ticket_id} by {'staff' if is_staff else 'user'} {user.id}")
    return support_message


async def close_ticket(db: AsyncSession, user: CurrentUser, ticket_id: UUID) -> SupportTicket:
    ticket = await get_ticket(db, user, ticket_id)
    if ticket.status == TicketStatus.CLOSED:
        raise AlreadyClosedError()
    repository.close(ticket)
    await db.commit()
    await db.refresh(ticket)
    logger.info(f"Ticket {ticket_id} closed by {user.id}")
    return ticket
