"""
User Router

Profile and document endpoints for the signed-in user.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.shared import ApiResponse, MessageResponse
from app.modules.users import service
from app.modules.users.schemas import (
    DocumentListResponse,
    DocumentResponse,
    DocumentType,
    ProfileUpdateRequest,
    UserResponse,
)

router = APIRouter()


@router.get("/profile", response_model=ApiResponse[UserResponse])
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    account = await service.get_user_or_404(db, user.id)
    return ApiResponse(data=UserResponse.from_user(account))


@router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    data: ProfileUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[UserResponse]:
    account = await service.update_profile(db, user.id, data)
    return ApiResponse(data=UserResponse.from_user(account), message="Profile updated successfully")


@router.get("/documents", response_model=ApiResponse[DocumentListResponse])
async def list_documents(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DocumentListResponse]:
    documents = await service.list_documents(db, user.id)
    return ApiResponse(
        data=DocumentListResponse(
            documents=[DocumentResponse.model_validate(d) for d in documents]
        )
    )


@router.post(
    "/documents",
    response_model=ApiResponse[DocumentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    file: UploadFile = File(...),
    document_type: DocumentType = Form(DocumentType.OTHER, alias="documentType"),
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[DocumentResponse]:
    """Upload a PDF, Word document or image (max 10MB)."""
    document = await service.upload_document(db, user.id, document_type, file)
    return ApiResponse(data=DocumentResponse.model_validate(document), message="Document uploaded")


@router.delete("/documents/{document_id}", response_model=ApiResponse[MessageResponse])
async def delete_document(
    document_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    await service.delete_document(db, user.id, document_id)
    return ApiResponse(data=MessageResponse(message="Document deleted"))
