"""CancelSubscription Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import SubscriptionStatus
from .dtos import SubscriptionResponseDTO
from .mappers import to_subscription_dto

logger = logging.getLogger(__name__)


class CancelSubscription:

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: int) -> Result[SubscriptionResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message=f"Subscription {subscription_id} not found",
                    )
                )

            if subscription.status == SubscriptionStatus.CANCELLED:
                return Return.err(
                    Error(
                        code="ALREADY_CANCELLED",
                        message=f"Subscription {subscription_id} is already cancelled",
                    )
                )

            subscription.status = SubscriptionStatus.CANCELLED
            subscription.is_active = False
            await self.subscription_repo.update(subscription)
            await self.uow.commit()
            logger.info(f"Subscription {subscription.id} cancelled")

            return Return.ok(to_subscription_dto(subscription))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_SUBSCRIPTION_FAILED",
                    message="Failed to cancel subscription",
                    reason=str(e),
                )
            )
