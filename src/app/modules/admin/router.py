"""
Admin Jobs Router

Endpoints:
- GET /admin/jobs - Registered background jobs and their next run time
- POST /admin/jobs/{job_id}/run - Run a job now, outside its schedule
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.core.auth import CurrentUser, require_admin
from app.core.errors import NotFoundError
from app.core.scheduler import list_registered_jobs, trigger_job_manually
from app.modules.shared import ApiResponse, CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class JobInfo(CamelModel):
    job_id: str
    description: str = ""
    trigger: str
    next_run_time: str | None = None


class JobListResponse(CamelModel):
    jobs: list[JobInfo]


class JobRunResponse(CamelModel):
    job_id: str
    status: str
    executed_at: str
    result: Any = None
    error: str | None = None


@router.get("/jobs", response_model=ApiResponse[JobListResponse])
async def list_jobs(admin: CurrentUser = Depends(require_admin)) -> ApiResponse[JobListResponse]:
    return ApiResponse(
        data=JobListResponse(jobs=[JobInfo(**job) for job in list_registered_jobs()])
    )


@router.post("/jobs/{job_id}/run", response_model=ApiResponse[JobRunResponse])
async def run_job(
    job_id: str,
    admin: CurrentUser = Depends(require_admin),
) -> ApiResponse[JobRunResponse]:
    """
    Raises:
        404 JOB_NOT_FOUND: No job registered under job_id
    """
    try:
        result = await trigger_job_manually(job_id)
    except ValueError:
        raise NotFoundError("Job", job_id) from None
    logger.info(f"Admin {admin.id} ran job {job_id}: {result['status']}")
    return ApiResponse(data=JobRunResponse(**result))
