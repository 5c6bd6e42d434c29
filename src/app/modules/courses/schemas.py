"""
Course Schemas
"""

from datetime import datetime
from uuid import UUID

from app.modules.courses.models import CourseEnrollment, CourseType, EnrollmentStatus
from app.modules.shared import CamelModel, PaginationMeta


class CourseResponse(CamelModel):
    id: UUID
    title: str
    type: CourseType
    price: float
    description: str | None = None
    duration: str | None = None


class CourseDetailResponse(CourseResponse):
    content: str | None = None


class CourseListResponse(CamelModel):
    courses: list[CourseResponse]
    pagination: PaginationMeta


class EnrollmentResponse(CamelModel):
    id: UUID
    course_id: UUID
    course_title: str
    course_type: CourseType
    course_description: str | None = None
    course_duration: str | None = None
    progress: int
    status: EnrollmentStatus
    enrolled_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_enrollment(cls, enrollment: CourseEnrollment) -> "EnrollmentResponse":
        course = enrollment.course
        return cls(
            id=enrollment.id,
            course_id=enrollment.course_id,
            course_title=course.title,
            course_type=course.type,
            course_description=course.description,
            course_duration=course.duration,
            progress=enrollment.progress,
            status=enrollment.status,
            enrolled_at=enrollment.enrolled_at,
            completed_at=enrollment.completed_at,
        )


class EnrollmentListResponse(CamelModel):
    enrollments: list[EnrollmentResponse]
