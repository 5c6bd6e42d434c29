"""
Blog Service Layer

Content is cleaned of script-capable markup before it is stored; excerpts
and reading times are derived from the cleaned text.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.errors import NotFoundError, ValidationFailedError
from app.core.pagination import Pagination
from app.core.uploads import IMAGE_CONTENT_TYPES, IMAGE_EXTENSIONS, MAX_IMAGE_SIZE, save_upload
from app.modules.blog import repository
from app.modules.blog.helpers import (
    calculate_reading_time,
    generate_excerpt,
    generate_slug,
    sanitize_content,
)
from app.modules.blog.models import BlogPost, PostStatus
from app.modules.blog.repository import PostFilters
from app.modules.blog.schemas import (
    CategoryResponse,
    CreatePostRequest,
    ImageUploadResponse,
    PostDetail,
    PostListResponse,
    PostSummary,
    TagResponse,
    UpdatePostRequest,
)
from app.modules.shared import PaginationMeta

logger = logging.getLogger(__name__)

BLOG_IMAGE_DIR = "blog-images"

# Plain attribute updates copied straight from UpdatePostRequest
_SIMPLE_FIELDS = (
    "title",
    "excerpt",
    "featured_image",
    "featured_image_alt",
    "meta_title",
    "meta_description",
    "focus_keyword",
    "scheduled_for",
)


class PostNotFoundError(NotFoundError):
    def __init__(self, post_id: UUID | str | None = None):
        super().__init__("Post", post_id)


class SlugExistsError(ValidationFailedError):
    def __init__(self, slug: str):
        super().__init__(f"The slug '{slug}' is already in use", "SLUG_EXISTS")


class InvalidSlugError(ValidationFailedError):
    def __init__(self):
        super().__init__("A URL slug could not be generated from the title", "INVALID_SLUG")


# ============================================
# Public
# ============================================


async def list_posts(db: AsyncSession, filters: PostFilters, pagination: Pagination) -> PostListResponse:
    posts, total = await repository.list_published(db, filters, pagination.limit, pagination.offset)
    return PostListResponse(
        posts=[PostSummary.from_post(p) for p in posts],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_post_by_slug(db: AsyncSession, slug: str) -> PostDetail:
    """Counts a view and attaches up to three related posts."""
    post = await repository.get_published_by_slug(db, slug)
    if post is None:
        raise PostNotFoundError(slug)
    views = post.views_count
    await repository.increment_views(db, post.id)
    related = await repository.related_posts(db, post)
    detail = PostDetail.from_post(post, related)
    detail.views_count = views + 1
    return detail


async def list_categories(db: AsyncSession) -> list[CategoryResponse]:
    rows = await repository.categories_with_counts(db)
    return [
        CategoryResponse(
            id=c.id, name=c.name, slug=c.slug, description=c.description, count=count
        )
        for c, count in rows
    ]


async def list_tags(db: AsyncSession) -> list[TagResponse]:
    rows = await repository.top_tags(db)
    return [TagResponse(id=t.id, name=t.name, slug=t.slug, count=count) for t, count in rows]


# ============================================
# Admin
# ============================================


async def get_post_or_404(db: AsyncSession, post_id: UUID) -> BlogPost:
    post = await repository.get_post(db, post_id)
    if post is None:
        raise PostNotFoundError(post_id)
    return post


async def _resolve_slug(db: AsyncSession, slug: str | None, title: str, exclude_id: UUID | None = None) -> str:
    slug = slug or generate_slug(title)
    if not slug:
        raise InvalidSlugError()
    if await repository.slug_exists(db, slug, exclude_id):
        raise SlugExistsError(slug)
    return slug


def _apply_status(post: BlogPost, status: PostStatus, now: datetime) -> None:
    post.status = status
    if status == PostStatus.PUBLISHED and post.published_at is None:
        post.published_at = now


async def create_post(db: AsyncSession, author: CurrentUser, data: CreatePostRequest) -> BlogPost:
    """
    Raises:
        SlugExistsError: Slug taken by another post
        InvalidSlugError: Title produces an empty slug and none was given
    """
    content = sanitize_content(data.content)
    slug = await _resolve_slug(db, data.slug, data.title)

    post = BlogPost(
        title=data.title,
        slug=slug,
        content=content,
        excerpt=data.excerpt or generate_excerpt(content),
        featured_image=data.featured_image,
        featured_image_alt=data.featured_image_alt,
        meta_title=data.meta_title,
        meta_description=data.meta_description,
        focus_keyword=data.focus_keyword,
        scheduled_for=data.scheduled_for,
        author_id=author.id,
        reading_time=calculate_reading_time(content),
        views_count=0,
    )
    _apply_status(post, data.status, datetime.now(UTC))
    if data.category:
        post.categories = [await repository.get_or_create_category(db, data.category)]
    post.tags = [await repository.get_or_create_tag(db, name) for name in dict.fromkeys(data.tags)]

    db.add(post)
    await db.commit()
    await db.refresh(post)
    logger.info(f"Blog post {post.id} '{post.slug}' created by {author.id} ({post.status.value})")
    return post


async def update_post(db: AsyncSession, post_id: UUID, data: UpdatePostRequest) -> BlogPost:
    post = await get_post_or_404(db, post_id)
    provided = data.model_fields_set

    for field in _SIMPLE_FIELDS:
        if field in provided:
            setattr(post, field, getattr(data, field))

    if "slug" in provided and data.slug and data.slug != post.slug:
        post.slug = await _resolve_slug(db, data.slug, post.title, exclude_id=post.id)

    if data.content is not None:
        post.content = sanitize_content(data.content)
        post.reading_time = calculate_reading_time(post.content)
        if "excerpt" not in provided:
            post.excerpt = generate_excerpt(post.content)

    if data.status is not None:
        if data.status == PostStatus.SCHEDULED and post.scheduled_for is None:
            raise ValidationFailedError("scheduledFor is required for scheduled posts")
        _apply_status(post, data.status, datetime.now(UTC))

    if "category" in provided:
        post.categories = (
            [await repository.get_or_create_category(db, data.category)] if data.category else []
        )
    if data.tags is not None:
        post.tags = [await repository.get_or_create_tag(db, name) for name in dict.fromkeys(data.tags)]

    await db.commit()
    await db.refresh(post)
    logger.info(f"Blog post {post.id} updated: {sorted(provided)}")
    return post


async def delete_post(db: AsyncSession, post_id: UUID) -> None:
    post = await get_post_or_404(db, post_id)
    await repository.delete_post(db, post)
    logger.info(f"Blog post {post_id} deleted")


async def publish_post(db: AsyncSession, post_id: UUID) -> BlogPost:
    post = await get_post_or_404(db, post_id)
    _apply_status(post, PostStatus.PUBLISHED, datetime.now(UTC))
    await db.commit()
    await db.refresh(post)
    logger.info(f"Blog post {post_id} published")
    return post


async def list_drafts(db: AsyncSession) -> list[BlogPost]:
    return await repository.list_by_status(db, PostStatus.DRAFT)


async def upload_image(file: UploadFile) -> ImageUploadResponse:
    stored = await save_upload(
        file,
        BLOG_IMAGE_DIR,
        content_types=IMAGE_CONTENT_TYPES,
        extensions=IMAGE_EXTENSIONS,
        max_size=MAX_IMAGE_SIZE,
    )
    return ImageUploadResponse(url=stored.url, file_name=stored.original_name, size=stored.size)
