"""
Chat Service Layer
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.core.pagination import Pagination
from app.modules.chat import repository
from app.modules.chat.helpers import conversation_title, generate_reply
from app.modules.chat.models import ChatConversation, MessageRole
from app.modules.chat.schemas import (
    ChatMessageResponse,
    ConversationDetailResponse,
    ConversationListResponse,
    ConversationResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from app.modules.shared import PaginationMeta
from app.modules.users.models import User

logger = logging.getLogger(__name__)


class ConversationNotFoundError(NotFoundError):
    def __init__(self, conversation_id: UUID | None = None):
        super().__init__("Conversation", conversation_id)


async def get_conversation(db: AsyncSession, user_id: UUID, conversation_id: UUID) -> ChatConversation:
    conversation = await repository.get_user_conversation(db, conversation_id, user_id)
    if conversation is None:
        raise ConversationNotFoundError(conversation_id)
    return conversation


async def send_message(db: AsyncSession, user: User, data: SendMessageRequest) -> SendMessageResponse:
    """
    Store the user's message and the assistant's reply in one transaction.

    Raises:
        ConversationNotFoundError: conversation_id unknown or someone else's
    """
    if data.conversation_id is None:
        conversation = await repository.create_conversation(
            db, user.id, conversation_title(data.message)
        )
    else:
        conversation = await get_conversation(db, user.id, data.conversation_id)

    await repository.add_message(db, conversation, MessageRole.USER, data.message)
    reply = generate_reply(data.message, user.current_plan)
    assistant_message = await repository.add_message(db, conversation, MessageRole.ASSISTANT, reply)
    await db.commit()

    logger.debug(f"Chat reply in conversation {conversation.id} for user {user.id}")
    return SendMessageResponse(
        conversation_id=conversation.id,
        response=reply,
        timestamp=assistant_message.created_at,
    )


async def list_conversations(
    db: AsyncSession, user_id: UUID, pagination: Pagination
) -> ConversationListResponse:
    conversations, total = await repository.list_conversations(
        db, user_id, limit=pagination.limit, offset=pagination.offset
    )
    return ConversationListResponse(
        conversations=[ConversationResponse.model_validate(c) for c in conversations],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_conversation_detail(
    db: AsyncSession, user_id: UUID, conversation_id: UUID
) -> ConversationDetailResponse:
    conversation = await get_conversation(db, user_id, conversation_id)
    messages = await repository.list_messages(db, conversation.id)
    return ConversationDetailResponse(
        **ConversationResponse.model_validate(conversation).model_dump(),
        messages=[ChatMessageResponse.model_validate(m) for m in messages],
    )


async def delete_conversation(db: AsyncSession, user_id: UUID, conversation_id: UUID) -> None:
    conversation = await get_conversation(db, user_id, conversation_id)
    await repository.delete_conversation(db, conversation)
    logger.info(f"Conversation {conversation_id} deleted by user {user_id}")
