from typing import Optional
from src.domain.payment import Payment
from src.domain.subscription import Subscription
from src.domain.subscription_plan import SubscriptionPlan
from .dtos import SubscriptionPlanResponseDTO, SubscriptionResponseDTO


def to_plan_dto(plan: SubscriptionPlan) -> SubscriptionPlanResponseDTO:
    return SubscriptionPlanResponseDTO(
        id=plan.id,
        name=plan.name,
        description=plan.description,
        monthly_price=plan.monthly_price,
        yearly_price=plan.yearly_price,
        features=list(plan.features or []),
        is_active=plan.is_active,
        created_at=plan.created_at,
    )


def to_subscription_dto(
    subscription: Subscription, payment: Optional[Payment] = None
) -> SubscriptionResponseDTO:
    return SubscriptionResponseDTO(
        id=subscription.id,
        agency_id=subscription.agency_id,
        plan_id=subscription.plan_id,
        start_date=subscription.start_date,
        end_date=subscription.end_date,
        status=subscription.status.value,
        is_active=subscription.is_active,
        auto_renew=subscription.auto_renew,
        payment_id=payment.id if payment else None,
        amount_charged=payment.amount if payment else None,
        created_at=subscription.created_at,
        updated_at=subscription.updated_at,
    )
