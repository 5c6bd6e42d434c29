"""
Unit tests for course enrollment.
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.modules.courses.models import CourseType
from app.modules.courses.service import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    enroll,
)

SERVICE = "app.modules.courses.service"


@pytest.fixture
def course():
    return MagicMock(id=uuid4(), type=CourseType.PAID, title="IELTS Preparation Course")


class TestEnroll:
    @pytest.mark.asyncio
    async def test_success(self, course):
        enrollment = MagicMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_course = AsyncMock(return_value=course)
            mock_repo.get_enrollment = AsyncMock(return_value=None)
            mock_repo.create_enrollment = AsyncMock(return_value=enrollment)

            result = await enroll(AsyncMock(), uuid4(), course.id)

        assert result is enrollment
        assert result.course is course

    @pytest.mark.asyncio
    async def test_inactive_course(self):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_course = AsyncMock(return_value=None)
            with pytest.raises(CourseNotFoundError) as exc_info:
                await enroll(AsyncMock(), uuid4(), uuid4())
        assert exc_info.value.error_code == "COURSE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_existing_enrollment(self, course):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_course = AsyncMock(return_value=course)
            mock_repo.get_enrollment = AsyncMock(return_value=MagicMock())
            mock_repo.create_enrollment = AsyncMock()

            with pytest.raises(AlreadyEnrolledError) as exc_info:
                await enroll(AsyncMock(), uuid4(), course.id)

        assert exc_info.value.status_code == 409
        mock_repo.create_enrollment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_concurrent_enrollment_maps_to_conflict(self, course):
        db = AsyncMock()
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_active_course = AsyncMock(return_value=course)
            mock_repo.get_enrollment = AsyncMock(return_value=None)
            mock_repo.create_enrollment = AsyncMock(
                side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
            )

            with pytest.raises(AlreadyEnrolledError):
                await enroll(db, uuid4(), course.id)

        db.rollback.assert_awaited_once()
