"""
Support Repository

Ticket writes leave the commit to the service so a ticket and its first
message land together.
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.support.models import (
    SupportMessage,
    SupportTicket,
    TicketCategory,
    TicketPriority,
    TicketStatus,
)


async def create_ticket(
    db: AsyncSession,
    *,
    user_id: UUID,
    subject: str,
    category: TicketCategory,
    priority: TicketPriority,
) -> SupportTicket:
    ticket = SupportTicket(
        user_id=user_id,
        subject=subject,
        category=category,
        priority=priority,
        status=TicketStatus.OPEN,
    )
    db.add(ticket)
    await db.flush()
    return ticket


async def add_message(
    db: AsyncSession,
    ticket: SupportTicket,
    user_id: UUID,
    message: str,
    is_staff: bool = False,
) -> SupportMessage:
    support_message = SupportMessage(
        ticket_id=ticket.id, user_id=user_id, message=message, is_staff=is_staff
    )
    db.add(support_message)
    await db.flush()
    return support_message


async def get_ticket(
    db: AsyncSession, ticket_id: UUID, user_id: UUID | None = None
) -> SupportTicket | None:
    """Owner-scoped unless `user_id` is None (staff)."""
    query = select(SupportTicket).where(SupportTicket.id == ticket_id)
    if user_id is not None:
        query = query.where(SupportTicket.user_id == user_id)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def list_messages(db: AsyncSession, ticket_id: UUID) -> list[SupportMessage]:
    result = await db.execute(
        select(SupportMessage)
        .where(SupportMessage.ticket_id == ticket_id)
        .order_by(SupportMessage.created_at.asc())
    )
    return list(result.scalars().unique().all())


async def list_tickets(
    db: AsyncSession,
    user_id: UUID | None,
    status: TicketStatus | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[SupportTicket], int]:
    conditions = []
    if user_id is not None:
        conditions.append(SupportTicket.user_id == user_id)
    if status is not None:
        conditions.append(SupportTicket.status == status)

    total = (await db.execute(select(func.count(SupportTicket.id)).where(*conditions))).scalar_one()
    result = await db.execute(
        select(SupportTicket)
        .where(*conditions)
        .order_by(SupportTicket.updated_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


def close(ticket: SupportTicket) -> None:
    ticket.status = TicketStatus.CLOSED
    ticket.closed_at = datetime.now(UTC)
