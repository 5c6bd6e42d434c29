"""
Blog Models
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.modules.shared import BaseModel
from app.modules.users.models import User


class PostStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"
    ARCHIVED = "archived"


blog_post_categories = Table(
    "blog_post_categories",
    Base.metadata,
    Column(
        "post_id",
        UUID(as_uuid=True),
        ForeignKey("blog_posts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        UUID(as_uuid=True),
        ForeignKey("blog_categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

blog_post_tags = Table(
    "blog_post_tags",
    Base.metadata,
    Column(
        "post_id",
        UUID(as_uuid=True),
        ForeignKey("blog_posts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        UUID(as_uuid=True),
        ForeignKey("blog_tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class BlogCategory(BaseModel):
    __tablename__ = "blog_categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class BlogTag(BaseModel):
    __tablename__ = "blog_tags"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)


class BlogPost(BaseModel):
    """
    A blog article.

    Visible publicly only while PUBLISHED with published_at in the past.
    SCHEDULED posts are published by the scheduler once scheduled_for passes.
    """

    __tablename__ = "blog_posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    featured_image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    featured_image_alt: Mapped[str | None] = mapped_column(String(255), nullable=True)
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[PostStatus] = mapped_column(
        SAEnum(PostStatus, name="post_status"), nullable=False, default=PostStatus.DRAFT, index=True
    )
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    scheduled_for: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    views_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reading_time: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    # SEO
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(String(160), nullable=True)
    focus_keyword: Mapped[str | None] = mapped_column(String(100), nullable=True)

    author: Mapped[User | None] = relationship("User", lazy="joined")
    categories: Mapped[list[BlogCategory]] = relationship(
        "BlogCategory", secondary=blog_post_categories, lazy="selectin", order_by="BlogCategory.name"
    )
    tags: Mapped[list[BlogTag]] = relationship(
        "BlogTag", secondary=blog_post_tags, lazy="selectin", order_by="BlogTag.name"
    )

    def __repr__(self) -> str:
        return f"<BlogPost(id={self.id}, slug={self.slug}, status={self.status.value})>"
