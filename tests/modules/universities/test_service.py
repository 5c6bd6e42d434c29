"""
Unit tests for university search and the free-tier cap.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.core.pagination import Pagination
from app.modules.subscriptions.plans import FREE_TIER_SEARCH_LIMIT, SubscriptionPlan
from app.modules.universities.repository import UniversityFilters
from app.modules.universities.service import (
    FREE_TIER_NOTICE,
    UniversityNotFoundError,
    get_university_detail,
    search_universities,
)

SERVICE = "app.modules.universities.service"


class TestSearchUniversities:
    @pytest.mark.asyncio
    async def test_free_tier_capped(self):
        db = AsyncMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.search_universities = AsyncMock(return_value=([], 40))
            result = await search_universities(db, UniversityFilters(), Pagination(page=2, limit=20), SubscriptionPlan.FREE)

        mock_repo.search_universities.assert_awaited_once_with(
            db, UniversityFilters(), FREE_TIER_SEARCH_LIMIT, FREE_TIER_SEARCH_LIMIT
        )
        assert result.notice == FREE_TIER_NOTICE
        assert result.pagination.limit == FREE_TIER_SEARCH_LIMIT

    @pytest.mark.asyncio
    async def test_paid_plan_uncapped(self):
        db = AsyncMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.search_universities = AsyncMock(return_value=([], 40))
            result = await search_universities(db, UniversityFilters(country="Canada"), Pagination(page=2, limit=20), SubscriptionPlan.ASIA)

        mock_repo.search_universities.assert_awaited_once_with(db, UniversityFilters(country="Canada"), 20, 20)
        assert result.notice is None
        assert result.pagination.has_more is False


class TestUniversityDetail:
    @pytest.mark.asyncio
    async def test_unknown_university(self):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_university = AsyncMock(return_value=None)
            with pytest.raises(UniversityNotFoundError) as exc_info:
                await get_university_detail(AsyncMock(), uuid4())

        assert exc_info.value.error_code == "UNIVERSITY_NOT_FOUND"
