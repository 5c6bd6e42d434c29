"""
User Service Layer

Profile reads/updates and document management. Shared by the /users and
/auth routers.
"""

import enum
import logging
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationFailedError
from app.core.uploads import delete_upload, save_upload
from app.modules.users.helpers import PROFILE_FIELDS, calculate_profile_completion
from app.modules.users.models import Document, User
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import DocumentType, ProfileUpdateRequest

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: UUID | None = None):
        super().__init__("User", user_id)


class NoUpdatesError(ValidationFailedError):
    def __init__(self):
        super().__init__("No fields to update", "NO_UPDATES")


async def get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    user = await UserRepository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UserNotFoundError(user_id)
    return user


async def update_profile(db: AsyncSession, user_id: UUID, data: ProfileUpdateRequest) -> User:
    """
    Apply a partial profile update and recompute profile completion.

    Raises:
        NoUpdatesError: Nothing was sent
        UserNotFoundError: Account missing or deactivated
    """
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise NoUpdatesError()

    user = await get_user_or_404(db, user_id)

    updates = {k: (v.value if isinstance(v, enum.Enum) else v) for k, v in updates.items()}
    merged = {field: getattr(user, field) for field in PROFILE_FIELDS} | updates
    updates["profile_complete"] = calculate_profile_completion(merged)

    user = await UserRepository.update(db, user, **updates)
    logger.info(f"Profile updated for user {user.id}: {sorted(updates)}")
    return user


async def upload_document(
    db: AsyncSession,
    user_id: UUID,
    document_type: DocumentType,
    file: UploadFile,
) -> Document:
    """Validate and store an uploaded document, then record it."""
    await get_user_or_404(db, user_id)
    stored = await save_upload(file, subdir="documents")

    document = await UserRepository.create_document(
        db,
        user_id=user_id,
        document_type=document_type.value,
        file_url=stored.url,
        file_name=stored.original_name,
        file_size=stored.size,
        content_type=stored.content_type,
    )
    logger.info(f"Document {document.id} ({document_type.value}) uploaded by user {user_id}")
    return document


async def list_documents(db: AsyncSession, user_id: UUID) -> list[Document]:
    return await UserRepository.list_documents(db, user_id)


async def delete_document(db: AsyncSession, user_id: UUID, document_id: UUID) -> None:
    document = await UserRepository.get_document(db, document_id, user_id)
    if document is None:
        raise NotFoundError("Document", document_id)
    await UserRepository.delete_document(db, document)
    await delete_upload(document.file_url)
