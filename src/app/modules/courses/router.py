"""
Course Router
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.courses import service
from app.modules.courses.models import CourseType
from app.modules.courses.schemas import (
    CourseDetailResponse,
    CourseListResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
)
from app.modules.shared import ApiResponse

router = APIRouter()


@router.get("", response_model=ApiResponse[CourseListResponse])
async def list_courses(
    course_type: CourseType | None = Query(default=None, alias="type"),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseListResponse]:
    return ApiResponse(data=await service.list_courses(db, course_type, pagination))


@router.get("/my/enrollments", response_model=ApiResponse[EnrollmentListResponse])
async def my_enrollments(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EnrollmentListResponse]:
    enrollments = await service.list_enrollments(db, user.id)
    return ApiResponse(
        data=EnrollmentListResponse(
            enrollments=[EnrollmentResponse.from_enrollment(e) for e in enrollments]
        )
    )


@router.get("/{course_id}", response_model=ApiResponse[CourseDetailResponse])
async def get_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[CourseDetailResponse]:
    course = await service.get_course(db, course_id)
    return ApiResponse(data=CourseDetailResponse.model_validate(course))


@router.post(
    "/{course_id}/enroll",
    response_model=ApiResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
)
async def enroll(
    course_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[EnrollmentResponse]:
    """
    Raises:
        404 COURSE_NOT_FOUND: Unknown or inactive course
        409 ALREADY_ENROLLED
    """
    enrollment = await service.enroll(db, user.id, course_id)
    return ApiResponse(
        data=EnrollmentResponse.from_enrollment(enrollment),
        message="Course enrollment successful",
    )
