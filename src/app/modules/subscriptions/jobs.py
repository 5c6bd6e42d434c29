"""
Subscription background jobs.

expire_subscriptions runs hourly: ACTIVE subscriptions past expires_at become
EXPIRED and their users drop back to the free plan. Idempotent.
"""

import logging
from datetime import UTC, datetime

from apscheduler.triggers.interval import IntervalTrigger

from app.core.database import async_session_maker
from app.core.scheduler import register_job
from app.modules.subscriptions import repository
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

EXPIRE_SUBSCRIPTIONS_JOB_ID = "subscriptions_expire_lapsed"


async def expire_subscriptions() -> dict[str, int]:
    now = datetime.now(UTC)
    async with async_session_maker() as db:
        expired = await repository.expire_lapsed(db, now)
        await db.commit()
        downgraded = await UserRepository.downgrade_expired(db, now)

    if expired or downgraded:
        logger.info(f"Expired {expired} subscriptions, downgraded {downgraded} users to free")
    return {"expired": expired, "downgraded": downgraded}


def register_subscription_jobs() -> None:
    register_job(
        job_id=EXPIRE_SUBSCRIPTIONS_JOB_ID,
        func=expire_subscriptions,
        trigger=IntervalTrigger(hours=1),
        description="Expire lapsed paid subscriptions and move their users back to the free plan",
    )
