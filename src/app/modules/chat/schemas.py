"""
Chat Schemas
"""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field

from app.core.sanitize import PlainText
from app.modules.chat.models import MessageRole
from app.modules.shared import CamelModel, PaginationMeta


class SendMessageRequest(CamelModel):
    message: Annotated[PlainText, Field(min_length=1, max_length=2000)]
    conversation_id: UUID | None = None


class SendMessageResponse(CamelModel):
    conversation_id: UUID
    response: str
    timestamp: datetime


class ChatMessageResponse(CamelModel):
    role: MessageRole
    content: str
    created_at: datetime


class ConversationResponse(CamelModel):
    id: UUID
    title: str | None = None
    created_at: datetime
    last_message_at: datetime


class ConversationDetailResponse(ConversationResponse):
    messages: list[ChatMessageResponse]


class ConversationListResponse(CamelModel):
    conversations: list[ConversationResponse]
    pagination: PaginationMeta
