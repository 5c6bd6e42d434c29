"""
Subscription-gated access.

`require_subscription(plan)` loads the caller's account and compares the plan
actually in force (after date-based expiry) against the required tier. The
plan claim inside the JWT is not trusted here because it goes stale as soon
as a subscription is bought or expires.
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user, get_optional_user
from app.core.database import get_db
from app.core.errors import PermissionDeniedError
from app.modules.subscriptions.plans import SubscriptionPlan, has_plan_level
from app.modules.users.models import User
from app.modules.users.repository import UserRepository
from app.modules.users.service import get_user_or_404

logger = logging.getLogger(__name__)


class SubscriptionRequiredError(PermissionDeniedError):
    def __init__(self, required: SubscriptionPlan, current: SubscriptionPlan):
        super().__init__(
            message=f"This feature requires the {required.value} plan or higher.",
            error_code="SUBSCRIPTION_REQUIRED",
            details={"requiredPlan": required.value, "currentPlan": current.value},
        )


async def get_current_account(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The caller's User row. 404 when the account was removed or deactivated."""
    return await get_user_or_404(db, user.id)


def require_subscription(plan: SubscriptionPlan | str) -> Callable[..., Awaitable[User]]:
    """
    Build a dependency that admits only users on `plan` or a higher tier.

    Usage:
        @router.get("/auto-match")
        async def auto_match(user: User = Depends(require_subscription(SubscriptionPlan.GLOBAL))):
            ...
    """
    required = SubscriptionPlan.parse(plan)

    async def dependency(account: User = Depends(get_current_account)) -> User:
        current = account.current_plan
        if not has_plan_level(current, required):
            logger.info(
                f"Subscription gate: user {account.id} on {current.value}, needs {required.value}"
            )
            raise SubscriptionRequiredError(required, current)
        return account

    return dependency


async def get_optional_plan(
    user: CurrentUser | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
) -> SubscriptionPlan:
    """Plan in force for the caller; anonymous or unknown callers count as FREE."""
    if user is None:
        return SubscriptionPlan.FREE
    account = await UserRepository.get_by_id(db, user.id)
    if account is None or not account.is_active:
        return SubscriptionPlan.FREE
    return account.current_plan
