"""Subscription API Routes

FastAPI routes for subscription plans and agency subscriptions.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.use_cases.subscriptions import (
    CreateSubscriptionPlan,
    ListSubscriptionPlans,
    GetSubscriptionPlan,
    UpdateSubscriptionPlan,
    DeleteSubscriptionPlan,
    CreateSubscription,
    CancelSubscription,
    RenewSubscription,
    UpdateSubscription,
    GetSubscription,
    ListSubscriptions,
    ListSubscriptionPayments,
    CreateSubscriptionPlanCommandDTO,
    UpdateSubscriptionPlanCommandDTO,
    CreateSubscriptionCommandDTO,
    RenewSubscriptionCommandDTO,
    UpdateSubscriptionCommandDTO,
    SubscriptionPlanResponseDTO,
    SubscriptionPlanListResponseDTO,
    SubscriptionResponseDTO,
    SubscriptionListResponseDTO,
)
from src.app.use_cases.payments import PaymentListResponseDTO
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.subscription_plan_repository import SqlAlchemySubscriptionPlanRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.subscription_request import (
    CreateSubscriptionPlanRequestSchema,
    CreateSubscriptionRequestSchema,
    RenewSubscriptionRequestSchema,
    UpdateSubscriptionRequestSchema,
    UpdateSubscriptionPlanRequestSchema,
)
from src.domain.subscription import SubscriptionStatus
from src.depends import get_session, get_payment_gateway, get_notification_service
from src.api.error import ClientError

plans_router = APIRouter(prefix="/subscription-plans", tags=["Subscriptions"])
router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@plans_router.post(
    "",
    response_model=SubscriptionPlanResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_subscription_plan(
    request: CreateSubscriptionPlanRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Create a subscription plan with monthly and yearly prices.

    **Returns:**
    - 201: Plan created
    - 400: Invalid prices
    """
    use_case = CreateSubscriptionPlan(
        uow=SqlAlchemyUnitOfWork(session),
        plan_repo=SqlAlchemySubscriptionPlanRepository(session),
    )
    command = CreateSubscriptionPlanCommandDTO(**request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@plans_router.get("", response_model=SubscriptionPlanListResponseDTO)
async def list_subscription_plans(session: AsyncSession = Depends(get_session)):
    """List active plans, cheapest first."""
    result = await ListSubscriptionPlans(SqlAlchemySubscriptionPlanRepository(session)).execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@plans_router.get("/{plan_id}", response_model=SubscriptionPlanResponseDTO)
async def get_subscription_plan(plan_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a plan, including withdrawn ones.

    **Returns:**
    - 200: Plan found
    - 404: Plan not found
    """
    result = await GetSubscriptionPlan(SqlAlchemySubscriptionPlanRepository(session)).execute(plan_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@plans_router.patch("/{plan_id}", response_model=SubscriptionPlanResponseDTO)
async def update_subscription_plan(
    plan_id: int,
    request: UpdateSubscriptionPlanRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Partially update a plan. New prices apply to future charges only.

    **Returns:**
    - 200: Plan updated
    - 400: Invalid prices
    - 404: Plan not found
    """
    use_case = UpdateSubscriptionPlan(
        uow=SqlAlchemyUnitOfWork(session),
        plan_repo=SqlAlchemySubscriptionPlanRepository(session),
    )
    command = UpdateSubscriptionPlanCommandDTO(**request.model_dump(exclude_none=True))
    result = await use_case.execute(plan_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@plans_router.delete("/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription_plan(plan_id: int, session: AsyncSession = Depends(get_session)):
    """
    Withdraw a plan. The plan is deactivated, not removed.

    **Returns:**
    - 204: Plan withdrawn
    - 404: Plan not found
    - 409: Plan held by an active or pending subscription
    """
    use_case = DeleteSubscriptionPlan(
        uow=SqlAlchemyUnitOfWork(session),
        plan_repo=SqlAlchemySubscriptionPlanRepository(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
    )
    result = await use_case.execute(plan_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _renewing_use_case(cls, session: AsyncSession, payment_gateway: PaymentGateway, **kwargs):
    return cls(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        plan_repo=SqlAlchemySubscriptionPlanRepository(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        payment_gateway=payment_gateway,
        currency=ApplicationConfig.PAYMENT_CURRENCY,
        **kwargs,
    )


@router.post(
    "",
    response_model=SubscriptionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Agency already has an active subscription",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SUBSCRIPTION_ALREADY_ACTIVE",
                            "message": "Agency 7 already has an active subscription"
                        }
                    }
                }
            }
        },
    }
)
async def create_subscription(
    request: CreateSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Subscribe an agency to a plan.

    When `payment_method_id` is given the agency is charged the monthly
    price for periods of at most 32 days and the yearly price otherwise.
    A paid subscription is `pending` (inactive) until the charge settles;
    if the gateway is still processing it the payment webhook activates it.

    **Returns:**
    - 201: Subscription created
    - 400: end_date is not after start_date
    - 402: Payment declined
    - 404: Plan or agency not found
    - 409: Agency already has an active subscription
    - 502: Payment gateway unavailable
    """
    use_case = _renewing_use_case(
        CreateSubscription, session, payment_gateway, notification_service=notification_service
    )
    command = CreateSubscriptionCommandDTO(**request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{subscription_id}/cancel", response_model=SubscriptionResponseDTO)
async def cancel_subscription(subscription_id: int, session: AsyncSession = Depends(get_session)):
    """
    Cancel a subscription.

    **Returns:**
    - 200: Subscription cancelled
    - 404: Subscription not found
    - 410: Subscription already cancelled
    """
    use_case = CancelSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{subscription_id}/renew", response_model=SubscriptionResponseDTO)
async def renew_subscription(
    subscription_id: int,
    request: RenewSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Extend a subscription to a new end date, charging for the extension
    when a payment method is given.

    **Returns:**
    - 200: Subscription renewed and active
    - 400: new_end_date is not after the current end date
    - 402: Payment declined
    - 404: Subscription not found
    - 409: Agency has another active subscription
    - 502: Payment gateway unavailable
    """
    use_case = _renewing_use_case(RenewSubscription, session, payment_gateway)
    command = RenewSubscriptionCommandDTO(**request.model_dump())
    result = await use_case.execute(subscription_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/{subscription_id}", response_model=SubscriptionResponseDTO)
async def update_subscription(
    subscription_id: int,
    request: UpdateSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Partially update a subscription (plan, end date, active flag, auto-renew).

    **Returns:**
    - 200: Subscription updated
    - 400: end_date is not after start_date
    - 404: Subscription or plan not found
    """
    use_case = UpdateSubscription(
        uow=SqlAlchemyUnitOfWork(session),
        plan_repo=SqlAlchemySubscriptionPlanRepository(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
    )
    command = UpdateSubscriptionCommandDTO(**request.model_dump())
    result = await use_case.execute(subscription_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=SubscriptionListResponseDTO)
async def list_subscriptions(
    agency_id: Optional[int] = Query(default=None),
    subscription_status: Optional[SubscriptionStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session),
):
    """
    List subscriptions, newest first, optionally filtered by agency and status.

    **Returns:**
    - 200: Subscriptions
    """
    result = await ListSubscriptions(SqlAlchemySubscriptionRepository(session)).execute(
        agency_id, subscription_status
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{subscription_id}", response_model=SubscriptionResponseDTO)
async def get_subscription(subscription_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a subscription with its most recent payment.

    **Returns:**
    - 200: Subscription found
    - 404: Subscription not found
    """
    use_case = GetSubscription(
        SqlAlchemySubscriptionRepository(session), SqlAlchemyPaymentRepository(session)
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{subscription_id}/payments", response_model=PaymentListResponseDTO)
async def list_subscription_payments(subscription_id: int, session: AsyncSession = Depends(get_session)):
    """
    List the payments charged for a subscription, newest first.

    **Returns:**
    - 200: Payments
    - 404: Subscription not found
    """
    use_case = ListSubscriptionPayments(
        SqlAlchemySubscriptionRepository(session), SqlAlchemyPaymentRepository(session)
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
