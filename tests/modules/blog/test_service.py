"""
Unit tests for blog post management.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.core.errors import ValidationFailedError
from app.modules.blog.models import BlogPost, PostStatus
from app.modules.blog.schemas import CreatePostRequest, UpdatePostRequest
from app.modules.blog.service import (
    InvalidSlugError,
    PostNotFoundError,
    SlugExistsError,
    create_post,
    get_post_by_slug,
    publish_post,
    update_post,
)

SERVICE = "app.modules.blog.service"
AUTHOR = CurrentUser(id=uuid4(), email="admin@example.com", role="admin")


@pytest.fixture
def mock_db():
    db = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def post():
    return BlogPost(
        id=uuid4(),
        title="Studying in Canada",
        slug="studying-in-canada",
        content="Old content",
        excerpt="Old content",
        status=PostStatus.DRAFT,
        author_id=AUTHOR.id,
        reading_time=1,
        views_count=0,
    )


class TestCreatePost:
    @pytest.mark.asyncio
    async def test_derives_slug_excerpt_and_reading_time(self, mock_db):
        data = CreatePostRequest(title="Study in Germany: A 2026 Guide!", content="<p>Tuition is free.</p>")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.slug_exists = AsyncMock(return_value=False)
            post = await create_post(mock_db, AUTHOR, data)

        assert post.slug == "study-in-germany-a-2026-guide"
        assert post.excerpt == "Tuition is free."
        assert post.reading_time == 1
        assert post.status == PostStatus.DRAFT
        assert post.published_at is None
        assert post.author_id == AUTHOR.id
        mock_db.add.assert_called_once_with(post)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_published_post_gets_timestamp(self, mock_db):
        data = CreatePostRequest(title="Visa tips", content="Apply early", status=PostStatus.PUBLISHED)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.slug_exists = AsyncMock(return_value=False)
            post = await create_post(mock_db, AUTHOR, data)

        assert post.published_at is not None

    @pytest.mark.asyncio
    async def test_taken_slug(self, mock_db):
        data = CreatePostRequest(title="Visa tips", content="Apply early", slug="visa-tips")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.slug_exists = AsyncMock(return_value=True)
            with pytest.raises(SlugExistsError) as exc_info:
                await create_post(mock_db, AUTHOR, data)

        assert exc_info.value.error_code == "SLUG_EXISTS"
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_title_without_slug_characters(self, mock_db):
        data = CreatePostRequest(title="!!!", content="Body")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.slug_exists = AsyncMock(return_value=False)
            with pytest.raises(InvalidSlugError):
                await create_post(mock_db, AUTHOR, data)


class TestUpdatePost:
    @pytest.mark.asyncio
    async def test_content_change_refreshes_derived_fields(self, mock_db, post):
        data = UpdatePostRequest(content="word " * 450)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_post = AsyncMock(return_value=post)
            await update_post(mock_db, post.id, data)

        assert post.reading_time == 3
        assert post.excerpt.endswith("...")
        assert post.title == "Studying in Canada"

    @pytest.mark.asyncio
    async def test_explicit_excerpt_kept(self, mock_db, post):
        data = UpdatePostRequest(content="New body", excerpt="Hand written")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_post = AsyncMock(return_value=post)
            await update_post(mock_db, post.id, data)

        assert post.excerpt == "Hand written"

    @pytest.mark.asyncio
    async def test_scheduling_needs_date(self, mock_db, post):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_post = AsyncMock(return_value=post)
            with pytest.raises(ValidationFailedError):
                await update_post(mock_db, post.id, UpdatePostRequest(status=PostStatus.SCHEDULED))

    @pytest.mark.asyncio
    async def test_slug_change_checked_against_other_posts(self, mock_db, post):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_post = AsyncMock(return_value=post)
            mock_repo.slug_exists = AsyncMock(return_value=False)
            await update_post(mock_db, post.id, UpdatePostRequest(slug="canada-guide"))

        assert post.slug == "canada-guide"
        mock_repo.slug_exists.assert_awaited_once_with(mock_db, "canada-guide", post.id)


class TestPublishing:
    @pytest.mark.asyncio
    async def test_publish(self, mock_db, post):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_post = AsyncMock(return_value=post)
            await publish_post(mock_db, post.id)

        assert post.status == PostStatus.PUBLISHED
        assert post.published_at <= datetime.now(UTC)

    @pytest.mark.asyncio
    async def test_republish_keeps_original_date(self, mock_db, post):
        first_published = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)
        post.status = PostStatus.PUBLISHED
        post.published_at = first_published
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_post = AsyncMock(return_value=post)
            await publish_post(mock_db, post.id)

        assert post.status == PostStatus.PUBLISHED
        assert post.published_at == first_published

    @pytest.mark.asyncio
    async def test_unknown_slug(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_published_by_slug = AsyncMock(return_value=None)
            with pytest.raises(PostNotFoundError) as exc_info:
                await get_post_by_slug(mock_db, "missing")

        assert exc_info.value.status_code == 404
