"""GetSubscription / ListSubscriptions / ListSubscriptionPayments Use Cases"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.use_cases.payments.dtos import PaymentListResponseDTO
from src.app.use_cases.payments.get_payment import to_payment_dto
from src.domain.payment import PaymentReferenceType
from src.domain.subscription import SubscriptionStatus
from .dtos import SubscriptionListResponseDTO, SubscriptionResponseDTO
from .mappers import to_subscription_dto


def _not_found(subscription_id: int) -> Error:
    return Error(code="SUBSCRIPTION_NOT_FOUND", message=f"Subscription {subscription_id} not found")


class GetSubscription:
    """The response carries the subscription's most recent payment, if any"""

    def __init__(self, subscription_repo: SubscriptionRepository, payment_repo: PaymentRepository):
        self.subscription_repo = subscription_repo
        self.payment_repo = payment_repo

    async def execute(self, subscription_id: int) -> Result[SubscriptionResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if not subscription:
                return Return.err(_not_found(subscription_id))

            payments = await self.payment_repo.list_by_reference(
                PaymentReferenceType.SUBSCRIPTION, str(subscription.id)
            )
            latest = payments[0] if payments else None

            return Return.ok(to_subscription_dto(subscription, latest))

        except Exception as e:
            return Return.err(
                Error(code="GET_SUBSCRIPTION_FAILED", message="Failed to retrieve subscription", reason=str(e))
            )


class ListSubscriptions:

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(
        self, agency_id: Optional[int] = None, status: Optional[SubscriptionStatus] = None
    ) -> Result[SubscriptionListResponseDTO]:
        try:
            subscriptions = await self.subscription_repo.list_all(agency_id=agency_id, status=status)
            return Return.ok(
                SubscriptionListResponseDTO(
                    subscriptions=[to_subscription_dto(s) for s in subscriptions],
                    total=len(subscriptions),
                )
            )

        except Exception as e:
            return Return.err(
                Error(code="LIST_SUBSCRIPTIONS_FAILED", message="Failed to list subscriptions", reason=str(e))
            )


class ListSubscriptionPayments:
    """Payments charged for one subscription, newest first"""

    def __init__(self, subscription_repo: SubscriptionRepository, payment_repo: PaymentRepository):
        self.subscription_repo = subscription_repo
        self.payment_repo = payment_repo

    async def execute(self, subscription_id: int) -> Result[PaymentListResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if not subscription:
                return Return.err(_not_found(subscription_id))

            payments = await self.payment_repo.list_by_reference(
                PaymentReferenceType.SUBSCRIPTION, str(subscription.id)
            )
            return Return.ok(
                PaymentListResponseDTO(
                    payments=[to_payment_dto(p) for p in payments],
                    total=len(payments),
                )
            )

        except Exception as e:
            return Return.err(
                Error(code="LIST_PAYMENTS_FAILED", message="Failed to list subscription payments", reason=str(e))
            )
