"""
Chat Repository
"""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.chat.models import ChatConversation, ChatMessage, MessageRole


async def create_conversation(db: AsyncSession, user_id: UUID, title: str) -> ChatConversation:
    conversation = ChatConversation(user_id=user_id, title=title)
    db.add(conversation)
    await db.flush()
    return conversation


async def get_user_conversation(
    db: AsyncSession, conversation_id: UUID, user_id: UUID
) -> ChatConversation | None:
    result = await db.execute(
        select(ChatConversation).where(
            ChatConversation.id == conversation_id, ChatConversation.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def add_message(
    db: AsyncSession, conversation: ChatConversation, role: MessageRole, content: str
) -> ChatMessage:
    message = ChatMessage(conversation_id=conversation.id, role=role, content=content)
    db.add(message)
    conversation.last_message_at = datetime.now(UTC)
    await db.flush()
    return message


async def list_messages(db: AsyncSession, conversation_id: UUID) -> list[ChatMessage]:
    result = await db.execute(
        select(ChatMessage)
        .where(ChatMessage.conversation_id == conversation_id)
        .order_by(ChatMessage.created_at.asc(), ChatMessage.role.asc())
    )
    return list(result.scalars().all())


async def list_conversations(
    db: AsyncSession, user_id: UUID, limit: int = 20, offset: int = 0
) -> tuple[list[ChatConversation], int]:
    total = (
        await db.execute(
            select(func.count(ChatConversation.id)).where(ChatConversation.user_id == user_id)
        )
    ).scalar_one()
    result = await db.execute(
        select(ChatConversation)
        .where(ChatConversation.user_id == user_id)
        .order_by(ChatConversation.last_message_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all()), total


async def delete_conversation(db: AsyncSession, conversation: ChatConversation) -> None:
    await db.delete(conversation)
    await db.commit()
