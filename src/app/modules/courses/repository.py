"""
Course Repository
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.courses.models import Course, CourseEnrollment, CourseType


async def list_courses(
    db: AsyncSession,
    course_type: CourseType | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Course], int]:
    conditions = [Course.is_active.is_(True)]
    if course_type is not None:
        conditions.append(Course.type == course_type)

    total = (await db.execute(select(func.count(Course.id)).where(*conditions))).scalar_one()
    result = await db.execute(
        select(Course).where(*conditions).order_by(Course.created_at.desc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all()), total


async def get_active_course(db: AsyncSession, course_id: UUID) -> Course | None:
    result = await db.execute(
        select(Course).where(Course.id == course_id, Course.is_active.is_(True))
    )
    return result.scalar_one_or_none()


async def get_enrollment(db: AsyncSession, user_id: UUID, course_id: UUID) -> CourseEnrollment | None:
    result = await db.execute(
        select(CourseEnrollment).where(
            CourseEnrollment.user_id == user_id,
            CourseEnrollment.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def create_enrollment(db: AsyncSession, user_id: UUID, course: Course) -> CourseEnrollment:
    """Raises IntegrityError when the user is already enrolled."""
    enrollment = CourseEnrollment(user_id=user_id, course_id=course.id, progress=0)
    db.add(enrollment)
    await db.commit()
    await db.refresh(enrollment)
    return enrollment


async def list_user_enrollments(db: AsyncSession, user_id: UUID) -> list[CourseEnrollment]:
    result = await db.execute(
        select(CourseEnrollment)
        .where(CourseEnrollment.user_id == user_id)
        .order_by(CourseEnrollment.enrolled_at.desc())
    )
    return list(result.scalars().unique().all())
