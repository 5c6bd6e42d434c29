"""
Blog Admin Router

Endpoints (all require the admin role):
- POST /blog/admin/posts - Create a post
- GET /blog/admin/posts/{id} - Any post, whatever its status
- PUT /blog/admin/posts/{id} - Partial update
- DELETE /blog/admin/posts/{id} - Delete
- POST /blog/admin/posts/{id}/publish - Publish now
- GET /blog/admin/drafts - Draft posts, most recently edited first
- POST /blog/admin/upload-image - Store an image for use in posts
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, require_admin
from app.core.database import get_db
from app.modules.blog import service
from app.modules.blog.schemas import (
    AdminPostListResponse,
    AdminPostResponse,
    CreatePostRequest,
    ImageUploadResponse,
    UpdatePostRequest,
)
from app.modules.shared import ApiResponse, MessageResponse

router = APIRouter()


@router.post(
    "/posts",
    response_model=ApiResponse[AdminPostResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    data: CreatePostRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AdminPostResponse]:
    """
    Raises:
        400 SLUG_EXISTS: Slug already used by another post
    """
    post = await service.create_post(db, admin, data)
    return ApiResponse(data=AdminPostResponse.from_post(post), message="Post created")


@router.get("/posts/{post_id}", response_model=ApiResponse[AdminPostResponse])
async def get_post(
    post_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AdminPostResponse]:
    post = await service.get_post_or_404(db, post_id)
    return ApiResponse(data=AdminPostResponse.from_post(post))


@router.put("/posts/{post_id}", response_model=ApiResponse[AdminPostResponse])
async def update_post(
    post_id: UUID,
    data: UpdatePostRequest,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AdminPostResponse]:
    post = await service.update_post(db, post_id, data)
    return ApiResponse(data=AdminPostResponse.from_post(post), message="Post updated successfully")


@router.delete("/posts/{post_id}", response_model=ApiResponse[MessageResponse])
async def delete_post(
    post_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[MessageResponse]:
    await service.delete_post(db, post_id)
    return ApiResponse(data=MessageResponse(message="Post deleted successfully"))


@router.post("/posts/{post_id}/publish", response_model=ApiResponse[AdminPostResponse])
async def publish_post(
    post_id: UUID,
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AdminPostResponse]:
    post = await service.publish_post(db, post_id)
    return ApiResponse(data=AdminPostResponse.from_post(post), message="Post published successfully")


@router.get("/drafts", response_model=ApiResponse[AdminPostListResponse])
async def list_drafts(
    admin: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AdminPostListResponse]:
    posts = await service.list_drafts(db)
    return ApiResponse(data=AdminPostListResponse(posts=[AdminPostResponse.from_post(p) for p in posts]))


@router.post(
    "/upload-image",
    response_model=ApiResponse[ImageUploadResponse],
    status_code=status.HTTP_201_CREATED,
)
async def upload_image(
    file: UploadFile = File(...),
    admin: CurrentUser = Depends(require_admin),
) -> ApiResponse[ImageUploadResponse]:
    """JPEG, PNG, GIF or WebP up to 5MB."""
    return ApiResponse(data=await service.upload_image(file))
