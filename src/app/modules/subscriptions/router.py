"""
Subscription Router
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.shared import ApiResponse
from app.modules.subscriptions import service
from app.modules.subscriptions.dependencies import get_current_account
from app.modules.subscriptions.schemas import (
    CreateSubscriptionRequest,
    CurrentSubscriptionResponse,
    PlanListResponse,
    PlanResponse,
    SubscriptionListResponse,
    SubscriptionResponse,
)
from app.modules.users.models import User

router = APIRouter()


@router.get("/plans", response_model=ApiResponse[PlanListResponse])
async def list_plans() -> ApiResponse[PlanListResponse]:
    """Purchasable plans. Public."""
    return ApiResponse(
        data=PlanListResponse(plans=[PlanResponse.from_offer(p) for p in service.list_plans()])
    )


@router.post(
    "/create",
    response_model=ApiResponse[SubscriptionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription(
    data: CreateSubscriptionRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SubscriptionResponse]:
    """
    Start a pending subscription; pay for it through /payments/create.

    Raises:
        400 INVALID_PLAN: Unknown plan
    """
    subscription = await service.create_subscription(db, user.id, data)
    return ApiResponse(
        data=SubscriptionResponse.model_validate(subscription),
        message="Subscription created. Complete payment to activate.",
    )


@router.get("/my-subscriptions", response_model=ApiResponse[SubscriptionListResponse])
async def my_subscriptions(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SubscriptionListResponse]:
    subscriptions = await service.list_user_subscriptions(db, user.id)
    return ApiResponse(
        data=SubscriptionListResponse(
            subscriptions=[SubscriptionResponse.model_validate(s) for s in subscriptions]
        )
    )


@router.get("/current", response_model=ApiResponse[CurrentSubscriptionResponse])
async def current_subscription(
    account: User = Depends(get_current_account),
) -> ApiResponse[CurrentSubscriptionResponse]:
    """Plan in force after expiry, with its feature set."""
    return ApiResponse(data=service.current_subscription(account))


@router.post("/{subscription_id}/activate", response_model=ApiResponse[SubscriptionResponse])
async def activate_subscription(
    subscription_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[SubscriptionResponse]:
    """
    Raises:
        404 SUBSCRIPTION_NOT_FOUND: Not the caller's subscription
        400 ALREADY_ACTIVE: Already active
    """
    subscription = await service.activate_user_subscription(db, user, subscription_id)
    return ApiResponse(
        data=SubscriptionResponse.model_validate(subscription),
        message="Subscription activated",
    )
