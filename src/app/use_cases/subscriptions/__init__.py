"""Subscription billing use cases"""
from .create_subscription_plan import CreateSubscriptionPlan, ListSubscriptionPlans
from .manage_plans import GetSubscriptionPlan, UpdateSubscriptionPlan, DeleteSubscriptionPlan
from .create_subscription import CreateSubscription
from .cancel_subscription import CancelSubscription
from .renew_subscription import RenewSubscription
from .update_subscription import UpdateSubscription
from .get_subscription import GetSubscription, ListSubscriptions, ListSubscriptionPayments
from .dtos import (
    CreateSubscriptionPlanCommandDTO,
    UpdateSubscriptionPlanCommandDTO,
    SubscriptionPlanResponseDTO,
    SubscriptionPlanListResponseDTO,
    CreateSubscriptionCommandDTO,
    RenewSubscriptionCommandDTO,
    UpdateSubscriptionCommandDTO,
    SubscriptionResponseDTO,
    SubscriptionListResponseDTO,
)

__all__ = [
    "CreateSubscriptionPlan",
    "ListSubscriptionPlans",
    "GetSubscriptionPlan",
    "UpdateSubscriptionPlan",
    "DeleteSubscriptionPlan",
    "CreateSubscription",
    "CancelSubscription",
    "RenewSubscription",
    "UpdateSubscription",
    "GetSubscription",
    "ListSubscriptions",
    "ListSubscriptionPayments",
    "CreateSubscriptionPlanCommandDTO",
    "UpdateSubscriptionPlanCommandDTO",
    "SubscriptionPlanResponseDTO",
    "SubscriptionPlanListResponseDTO",
    "CreateSubscriptionCommandDTO",
    "RenewSubscriptionCommandDTO",
    "UpdateSubscriptionCommandDTO",
    "SubscriptionResponseDTO",
    "SubscriptionListResponseDTO",
]
