"""
Blog Schemas
"""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.core.sanitize import PlainText, SafeHtml
from app.modules.blog.models import BlogPost, PostStatus
from app.modules.shared import CamelModel, PaginationMeta

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
DEFAULT_CATEGORY = "General"

Title = Annotated[PlainText, Field(min_length=1, max_length=255)]
Slug = Annotated[str, Field(min_length=1, max_length=100, pattern=SLUG_PATTERN)]
TagName = Annotated[PlainText, Field(min_length=1, max_length=100)]


# ============================================
# Requests
# ============================================


class PostWriteFields(CamelModel):
    excerpt: Annotated[PlainText, Field(max_length=500)] | None = None
    featured_image: Annotated[str, Field(max_length=500)] | None = None
    featured_image_alt: Annotated[PlainText, Field(max_length=255)] | None = None
    meta_title: Annotated[PlainText, Field(max_length=255)] | None = None
    meta_description: Annotated[PlainText, Field(max_length=160)] | None = None
    focus_keyword: Annotated[PlainText, Field(max_length=100)] | None = None
    scheduled_for: datetime | None = None

    @field_validator("scheduled_for")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class CreatePostRequest(PostWriteFields):
    title: Title
    content: Annotated[SafeHtml, Field(min_length=1)]
    slug: Slug | None = None
    status: PostStatus = PostStatus.DRAFT
    category: TagName | None = None
    tags: list[TagName] = Field(default_factory=list, max_length=20)

    @model_validator(mode="after")
    def check_schedule(self) -> "CreatePostRequest":
        if self.status == PostStatus.SCHEDULED and self.scheduled_for is None:
            raise ValueError("scheduledFor is required for scheduled posts")
        return self


class UpdatePostRequest(PostWriteFields):
    """Omitted fields are left unchanged; `category: null` and `tags: []` clear them."""

    title: Title | None = None
    content: Annotated[SafeHtml, Field(min_length=1)] | None = None
    slug: Slug | None = None
    status: PostStatus | None = None
    category: TagName | None = None
    tags: list[TagName] | None = Field(default=None, max_length=20)


# ============================================
# Responses
# ============================================


class CategoryRef(CamelModel):
    name: str
    slug: str


class PostSummary(CamelModel):
    id: UUID
    title: str
    slug: str
    excerpt: str | None = None
    featured_image: str | None = None
    featured_image_alt: str | None = None
    published_at: datetime | None = None
    reading_time: int
    views_count: int
    author: str | None = None
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_post(cls, post: BlogPost) -> "PostSummary":
        return cls(
            id=post.id,
            title=post.title,
            slug=post.slug,
            excerpt=post.excerpt,
            featured_image=post.featured_image,
            featured_image_alt=post.featured_image_alt,
            published_at=post.published_at,
            reading_time=post.reading_time,
            views_count=post.views_count,
            author=post.author.full_name if post.author else None,
            category=post.categories[0].name if post.categories else DEFAULT_CATEGORY,
        )


class PostDetail(PostSummary):
    content: str
    author_bio: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    focus_keyword: str | None = None
    categories: list[CategoryRef]
    tags: list[str]
    related: list[PostSummary] = Field(default_factory=list)

    @classmethod
    def from_post(cls, post: BlogPost, related: list[BlogPost] | None = None) -> "PostDetail":
        return cls(
            **PostSummary.from_post(post).model_dump(),
            content=post.content,
            author_bio=post.author.bio if post.author else None,
            meta_title=post.meta_title,
            meta_description=post.meta_description,
            focus_keyword=post.focus_keyword,
            categories=[CategoryRef.model_validate(c) for c in post.categories],
            tags=[t.name for t in post.tags],
            related=[PostSummary.from_post(p) for p in related or []],
        )


class PostListResponse(CamelModel):
    posts: list[PostSummary]
    pagination: PaginationMeta


class PostSearchResponse(CamelModel):
    posts: list[PostSummary]
    query: str


class CategoryResponse(CamelModel):
    id: UUID
    name: str
    slug: str
    description: str | None = None
    count: int


class TagResponse(CamelModel):
    id: UUID
    name: str
    slug: str
    count: int


class AdminPostResponse(CamelModel):
    id: UUID
    title: str
    slug: str
    status: PostStatus
    excerpt: str | None = None
    reading_time: int
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    author: str | None = None
    categories: list[str]
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post: BlogPost) -> "AdminPostResponse":
        return cls(
            id=post.id,
            title=post.title,
            slug=post.slug,
            status=post.status,
            excerpt=post.excerpt,
            reading_time=post.reading_time,
            published_at=post.published_at,
            scheduled_for=post.scheduled_for,
            author=post.author.full_name if post.author else None,
            categories=[c.name for c in post.categories],
            tags=[t.name for t in post.tags],
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class AdminPostListResponse(CamelModel):
    posts: list[AdminPostResponse]


class ImageUploadResponse(CamelModel):
    url: str
    file_name: str
    size: int
