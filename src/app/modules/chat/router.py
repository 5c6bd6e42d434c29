"""
Chat Router
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.chat import service
from app.modules.chat.schemas import (
    ConversationDetailResponse,
    ConversationListResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from app.modules.shared import ApiResponse, MessageResponse
from app.modules.subscriptions.dependencies import get_current_account
from app.modules.users.models import User

router = APIRouter()


@router.post("/message", response_model=ApiResponse[SendMessageResponse])
async def send_message(
    data: SendMessageRequest,
    account: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SendMessageResponse]:
    """
    Start a conversation, or continue one when conversationId is given.

    Raises:
        404 CONVERSATION_NOT_FOUND
    """
    return ApiResponse(data=await service.send_message(db, account, data))


@router.get("/conversations", response_model=ApiResponse[ConversationListResponse])
async def list_conversations(
    pagination: Pagination = Depends(get_pagination),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConversationListResponse]:
    return ApiResponse(data=await service.list_conversations(db, user.id, pagination))


@router.get("/conversations/{conversation_id}", response_model=ApiResponse[ConversationDetailResponse])
async def get_conversation(
    conversation_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[ConversationDetailResponse]:
    return ApiResponse(data=await service.get_conversation_detail(db, user.id, conversation_id))


@router.delete("/conversations/{conversation_id}", response_model=ApiResponse[MessageResponse])
async def delete_conversation(
    conversation_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    await service.delete_conversation(db, user.id, conversation_id)
    return ApiResponse(data=MessageResponse(message="Conversation deleted"))
