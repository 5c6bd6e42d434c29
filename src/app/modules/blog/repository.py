"""
Blog Repository
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import Select, and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.blog.helpers import generate_slug
from app.modules.blog.models import (
    BlogCategory,
    BlogPost,
    BlogTag,
    PostStatus,
    blog_post_categories,
    blog_post_tags,
)

RELATED_POSTS_LIMIT = 3
TOP_TAGS_LIMIT = 20
SEARCH_LIMIT = 20


@dataclass
class PostFilters:
    category: str | None = None
    tag: str | None = None
    q: str | None = None


def _visible(now: datetime | None = None):
    """Published, with a publication time that has arrived."""
    now = now or datetime.now(UTC)
    return and_(
        BlogPost.status == PostStatus.PUBLISHED,
        or_(BlogPost.published_at.is_(None), BlogPost.published_at <= now),
    )


def _text_match(q: str):
    pattern = f"%{q}%"
    return or_(
        BlogPost.title.ilike(pattern),
        BlogPost.content.ilike(pattern),
        BlogPost.excerpt.ilike(pattern),
    )


def _apply_filters(query: Select, filters: PostFilters) -> Select:
    query = query.where(_visible())
    if filters.category:
        query = query.where(BlogPost.categories.any(BlogCategory.slug == filters.category))
    if filters.tag:
        query = query.where(BlogPost.tags.any(BlogTag.slug == filters.tag))
    if filters.q:
        query = query.where(_text_match(filters.q))
    return query


# ============================================
# Public reads
# ============================================


async def list_published(
    db: AsyncSession, filters: PostFilters, limit: int, offset: int
) -> tuple[list[BlogPost], int]:
    total = (
        await db.execute(_apply_filters(select(func.count(BlogPost.id)), filters))
    ).scalar_one()
    result = await db.execute(
        _apply_filters(select(BlogPost), filters)
        .order_by(BlogPost.published_at.desc().nulls_last())
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().unique().all()), total


async def get_published_by_slug(db: AsyncSession, slug: str) -> BlogPost | None:
    result = await db.execute(select(BlogPost).where(BlogPost.slug == slug, _visible()))
    return result.scalar_one_or_none()


async def increment_views(db: AsyncSession, post_id: UUID) -> None:
    await db.execute(
        update(BlogPost)
        .where(BlogPost.id == post_id)
        .values(views_count=BlogPost.views_count + 1)
        .execution_options(synchronize_session=False)
    )
    await db.commit()


async def related_posts(db: AsyncSession, post: BlogPost, limit: int = RELATED_POSTS_LIMIT) -> list[BlogPost]:
    """Published posts sharing at least one category, newest first."""
    category_ids = [c.id for c in post.categories]
    if not category_ids:
        return []
    result = await db.execute(
        select(BlogPost)
        .where(
            _visible(),
            BlogPost.id != post.id,
            BlogPost.categories.any(BlogCategory.id.in_(category_ids)),
        )
        .order_by(BlogPost.published_at.desc().nulls_last())
        .limit(limit)
    )
    return list(result.scalars().unique().all())


async def search_published(db: AsyncSession, q: str, limit: int = SEARCH_LIMIT) -> list[BlogPost]:
    result = await db.execute(
        select(BlogPost)
        .where(_visible(), _text_match(q))
        .order_by(BlogPost.published_at.desc().nulls_last())
        .limit(limit)
    )
    return list(result.scalars().unique().all())


async def categories_with_counts(db: AsyncSession) -> list[tuple[BlogCategory, int]]:
    """Every category with its number of visible posts."""
    result = await db.execute(
        select(BlogCategory, func.count(BlogPost.id))
        .outerjoin(blog_post_categories, blog_post_categories.c.category_id == BlogCategory.id)
        .outerjoin(BlogPost, and_(BlogPost.id == blog_post_categories.c.post_id, _visible()))
        .group_by(BlogCategory.id)
        .order_by(BlogCategory.name)
    )
    return [(category, count) for category, count in result.all()]


async def top_tags(db: AsyncSession, limit: int = TOP_TAGS_LIMIT) -> list[tuple[BlogTag, int]]:
    count = func.count(BlogPost.id)
    result = await db.execute(
        select(BlogTag, count)
        .outerjoin(blog_post_tags, blog_post_tags.c.tag_id == BlogTag.id)
        .outerjoin(BlogPost, and_(BlogPost.id == blog_post_tags.c.post_id, _visible()))
        .group_by(BlogTag.id)
        .order_by(count.desc(), BlogTag.name)
        .limit(limit)
    )
    return [(tag, n) for tag, n in result.all()]


async def sitemap_entries(db: AsyncSession) -> list[tuple[str, datetime | None]]:
    result = await db.execute(
        select(BlogPost.slug, func.coalesce(BlogPost.updated_at, BlogPost.published_at))
        .where(_visible())
        .order_by(BlogPost.published_at.desc().nulls_last())
    )
    return [(slug, modified) for slug, modified in result.all()]


# ============================================
# Admin writes
# ============================================


async def get_post(db: AsyncSession, post_id: UUID) -> BlogPost | None:
    result = await db.execute(select(BlogPost).where(BlogPost.id == post_id))
    return result.scalar_one_or_none()


async def slug_exists(db: AsyncSession, slug: str, exclude_id: UUID | None = None) -> bool:
    query = select(BlogPost.id).where(BlogPost.slug == slug)
    if exclude_id is not None:
        query = query.where(BlogPost.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def get_or_create_category(db: AsyncSession, name: str) -> BlogCategory:
    """Look a category up by its slug; create it when missing. Caller commits."""
    slug = generate_slug(name)
    result = await db.execute(select(BlogCategory).where(BlogCategory.slug == slug))
    category = result.scalar_one_or_none()
    if category is None:
        category = BlogCategory(name=name.strip(), slug=slug)
        db.add(category)
        await db.flush()
    return category


async def get_or_create_tag(db: AsyncSession, name: str) -> BlogTag:
    """Caller commits."""
    slug = generate_slug(name)
    result = await db.execute(select(BlogTag).where(BlogTag.slug == slug))
    tag = result.scalar_one_or_none()
    if tag is None:
        tag = BlogTag(name=name.strip(), slug=slug)
        db.add(tag)
        await db.flush()
    return tag


async def delete_post(db: AsyncSession, post: BlogPost) -> None:
    await db.delete(post)
    await db.commit()


async def list_by_status(db: AsyncSession, status: PostStatus) -> list[BlogPost]:
    result = await db.execute(
        select(BlogPost).where(BlogPost.status == status).order_by(BlogPost.updated_at.desc())
    )
    return list(result.scalars().unique().all())


async def publish_due(db: AsyncSession, now: datetime | None = None) -> int:
    """
    Publish SCHEDULED posts whose scheduled_for has passed. Caller commits.

    Returns:
        Number of posts published
    """
    now = now or datetime.now(UTC)
    result = await db.execute(
        update(BlogPost)
        .where(
            BlogPost.status == PostStatus.SCHEDULED,
            BlogPost.scheduled_for.is_not(None),
            BlogPost.scheduled_for <= now,
        )
        .values(
            status=PostStatus.PUBLISHED,
            published_at=func.coalesce(BlogPost.scheduled_for, now),
        )
    )
    return result.rowcount or 0
