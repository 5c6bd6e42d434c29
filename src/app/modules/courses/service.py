"""
Course Service Layer
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.core.pagination import Pagination
from app.modules.courses import repository
from app.modules.courses.models import Course, CourseEnrollment, CourseType
from app.modules.courses.schemas import CourseListResponse, CourseResponse
from app.modules.shared import PaginationMeta

logger = logging.getLogger(__name__)


class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: UUID | None = None):
        super().__init__("Course", course_id)


class AlreadyEnrolledError(ConflictError):
    def __init__(self):
        super().__init__("You are already enrolled in this course", "ALREADY_ENROLLED")


async def list_courses(
    db: AsyncSession,
    course_type: CourseType | None,
    pagination: Pagination,
) -> CourseListResponse:
    courses, total = await repository.list_courses(
        db, course_type, limit=pagination.limit, offset=pagination.offset
    )
    return CourseListResponse(
        courses=[CourseResponse.model_validate(c) for c in courses],
        pagination=PaginationMeta.build(pagination.page, pagination.limit, total),
    )


async def get_course(db: AsyncSession, course_id: UUID) -> Course:
    """Inactive courses are reported as not found."""
    course = await repository.get_active_course(db, course_id)
    if course is None:
        raise CourseNotFoundError(course_id)
    return course


async def enroll(db: AsyncSession, user_id: UUID, course_id: UUID) -> CourseEnrollment:
    """
    Raises:
        CourseNotFoundError: Unknown or inactive course
        AlreadyEnrolledError: Existing enrollment, including one created concurrently
    """
    course = await get_course(db, course_id)
    if await repository.get_enrollment(db, user_id, course_id) is not None:
        raise AlreadyEnrolledError()

    try:
        enrollment = await repository.create_enrollment(db, user_id, course)
    except IntegrityError:
        await db.rollback()
        raise AlreadyEnrolledError() from None

    enrollment.course = course
    logger.info(f"User {user_id} enrolled in course {course_id} ({course.type.value})")
    return enrollment


async def list_enrollments(db: AsyncSession, user_id: UUID) -> list[CourseEnrollment]:
    return await repository.list_user_enrollments(db, user_id)
