"""
Blog background jobs.

publish_scheduled_posts runs every five minutes and publishes SCHEDULED
posts whose scheduled_for has passed.
"""

import logging

from apscheduler.triggers.interval import IntervalTrigger

from app.core.database import async_session_maker
from app.core.scheduler import register_job
from app.modules.blog import repository

logger = logging.getLogger(__name__)

PUBLISH_SCHEDULED_JOB_ID = "blog_publish_scheduled"


async def publish_scheduled_posts() -> dict[str, int]:
    async with async_session_maker() as db:
        published = await repository.publish_due(db)
        await db.commit()

    if published:
        logger.info(f"Published {published} scheduled blog posts")
    return {"published": published}


def register_blog_jobs() -> None:
    register_job(
        job_id=PUBLISH_SCHEDULED_JOB_ID,
        func=publish_scheduled_posts,
        trigger=IntervalTrigger(minutes=5),
        description="Publish scheduled blog posts whose time has come",
    )
