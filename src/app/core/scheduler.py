"""
Background Job Scheduler

Scheduled maintenance tasks on APScheduler's AsyncIOScheduler.

- Jobs are idempotent (safe to run multiple times)
- Failed jobs are logged but don't crash the scheduler
- Jobs can be triggered manually through the admin endpoints
- Jobs registered before start_scheduler() are added when it starts

Usage:
    register_job("expire_subscriptions", expire_subscriptions, IntervalTrigger(hours=1))
    await start_scheduler()
    ...
    await stop_scheduler()
"""

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Coroutine[Any, Any, Any]]

_scheduler: AsyncIOScheduler | None = None


@dataclass
class RegisteredJob:
    func: JobFunc
    trigger: BaseTrigger
    description: str = ""


_job_registry: dict[str, RegisteredJob] = {}


class SchedulerConfig:
    """Configuration for the background scheduler."""

    TIMEZONE = "UTC"

    JOB_DEFAULTS = {
        "coalesce": True,  # Combine missed executions into one
        "max_instances": 1,
        "misfire_grace_time": 60 * 5,
    }


def _job_listener(event: JobExecutionEvent) -> None:
    if event.exception:
        logger.error(
            f"Job {event.job_id} failed with exception: {event.exception}",
            exc_info=event.exception,
        )
    else:
        logger.info(f"Job {event.job_id} executed successfully")


def get_scheduler() -> AsyncIOScheduler | None:
    return _scheduler


async def start_scheduler() -> AsyncIOScheduler:
    """Create and start the scheduler, adding every registered job."""
    global _scheduler

    if _scheduler is not None and _scheduler.running:
        logger.warning("Scheduler already running, returning existing instance")
        return _scheduler

    _scheduler = AsyncIOScheduler(
        timezone=SchedulerConfig.TIMEZONE,
        job_defaults=SchedulerConfig.JOB_DEFAULTS,
    )
    _scheduler.add_listener(_job_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    for job_id, job in _job_registry.items():
        _scheduler.add_job(job.func, trigger=job.trigger, id=job_id, replace_existing=True)

    _scheduler.start()
    logger.info(f"Background job scheduler started with {len(_job_registry)} jobs")
    return _scheduler


async def stop_scheduler() -> None:
    """Stop the scheduler, waiting for running jobs."""
    global _scheduler

    if _scheduler is None or not _scheduler.running:
        return

    _scheduler.shutdown(wait=True)
    logger.info("Background job scheduler stopped")
    _scheduler = None


def register_job(job_id: str, func: JobFunc, trigger: BaseTrigger, description: str = "") -> None:
    """
    Register a job.

    Before start_scheduler() the job is only recorded; afterwards it is
    also scheduled immediately.
    """
    _job_registry[job_id] = RegisteredJob(func, trigger, description)

    if _scheduler is not None:
        _scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)
        logger.info(f"Registered job: {job_id}")


async def trigger_job_manually(job_id: str) -> dict[str, Any]:
    """
    Run a registered job now, outside its schedule.

    Raises:
        ValueError: If job_id is not registered
    """
    if job_id not in _job_registry:
        raise ValueError(
            f"Job {job_id} not found in registry. Available jobs: {list(_job_registry.keys())}"
        )

    func = _job_registry[job_id].func
    executed_at = datetime.now(UTC)
    logger.info(f"Manually triggering job: {job_id}")

    try:
        result = await func()
        return {
            "job_id": job_id,
            "status": "success",
            "executed_at": executed_at.isoformat(),
            "result": result,
        }
    except Exception as e:
        logger.error(f"Manual execution of job {job_id} failed: {e}", exc_info=True)
        return {
            "job_id": job_id,
            "status": "error",
            "executed_at": executed_at.isoformat(),
            "error": str(e),
        }


def list_registered_jobs() -> list[dict[str, Any]]:
    """Registered jobs with their next run time when the scheduler is running."""
    jobs = []
    for job_id, job in _job_registry.items():
        job_info: dict[str, Any] = {
            "job_id": job_id,
            "description": job.description,
            "trigger": str(job.trigger),
            "next_run_time": None,
        }
        if _scheduler is not None:
            scheduled_job = _scheduler.get_job(job_id)
            if scheduled_job and scheduled_job.next_run_time:
                job_info["next_run_time"] = scheduled_job.next_run_time.isoformat()
        jobs.append(job_info)
    return jobs
