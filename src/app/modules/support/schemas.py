"""
Support Schemas
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field

from app.core.sanitize import PlainText
from app.modules.shared import CamelModel, PaginationMeta
from app.modules.support.models import (
    SupportMessage,
    TicketCategory,
    TicketPriority,
    TicketStatus,
)


class CreateTicketRequest(CamelModel):
    subject: Annotated[PlainText, Field(min_length=1, max_length=255)]
    message: Annotated[PlainText, Field(min_length=1, max_length=5000)]
    category: TicketCategory = TicketCategory.GENERAL
    priority: TicketPriority = TicketPriority.MEDIUM


class ReplyRequest(CamelModel):
    message: Annotated[PlainText, Field(min_length=1, max_length=5000)]


class TicketResponse(CamelModel):
    id: UUID
    subject: str
    category: TicketCategory
    priority: TicketPriority
    status: TicketStatus
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None


class TicketMessageResponse(CamelModel):
    id: UUID
    message: str
    is_staff: bool
    author_name: str | None = None
    created_at: datetime

    @classmethod
    def from_message(cls, message: SupportMessage) -> "TicketMessageResponse":
        return cls(
            id=message.id,
            message=message.message,
            is_staff=message.is_staff,
            author_name=message.author.full_name if message.author else None,
            created_at=message.created_at,
        )


class TicketDetailResponse(TicketResponse):
    messages: list[TicketMessageResponse]


class TicketListResponse(CamelModel):
    tickets: list[TicketResponse]
    pagination: PaginationMeta
