"""RenewSubscription Use Case

Extends a subscription's end date and reactivates it.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.payment_gateway import PaymentGateway
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.user_repository import UserRepository
from src.domain.subscription import SubscriptionStatus
from .charging import SubscriptionCharger
from .dtos import RenewSubscriptionCommandDTO, SubscriptionResponseDTO
from .mappers import to_subscription_dto

logger = logging.getLogger(__name__)


class RenewSubscription:
    """
    Use Case: Renew a subscription

    Business Rules:
    1. new_end_date must be after the current end date; a subscription still
       waiting on its first charge cannot be renewed
    2. Renewal may not create a second active subscription for the agency
    3. With a payment method, the extension [end_date, new_end_date) is
       charged using the plan's period pricing; a failed charge leaves the
       subscription unchanged
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        plan_repo: SubscriptionPlanRepository,
        subscription_repo: SubscriptionRepository,
        payment_repo: PaymentRepository,
        payment_gateway: PaymentGateway,
        currency: str = "USD",
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.plan_repo = plan_repo
        self.subscription_repo = subscription_repo
        self.charger = SubscriptionCharger(payment_repo, payment_gateway, currency)

    async def execute(
        self,
        subscription_id: int,
        command: RenewSubscriptionCommandDTO,
        now: Optional[datetime] = None,
    ) -> Result[SubscriptionResponseDTO]:
        now = now or datetime.utcnow()

        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message=f"Subscription {subscription_id} not found",
                    )
                )

            if subscription.status == SubscriptionStatus.PENDING:
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message=f"Subscription {subscription.id} is awaiting its first payment",
                    )
                )

            if command.new_end_date <= subscription.end_date:
                return Return.err(
                    Error(
                        code="INVALID_INPUT",
                        message="new_end_date must be after the current end date",
                    )
                )

            other = await self.subscription_repo.get_current_for_agency(
                subscription.agency_id, now, exclude_id=subscription.id
            )
            if other:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_ALREADY_ACTIVE",
                        message=f"Agency {subscription.agency_id} already has active subscription {other.id}",
                    )
                )

            payment = None
            if command.payment_method_id:
                plan = await self.plan_repo.get_by_id(subscription.plan_id)
                if not plan:
                    return Return.err(
                        Error(
                            code="PLAN_NOT_FOUND",
                            message=f"Subscription plan {subscription.plan_id} not found",
                        )
                    )
                agency = await self.user_repo.get_by_id(subscription.agency_id)

                amount = plan.price_for_period(subscription.end_date, command.new_end_date)
                payment = await self.charger.open(
                    subscription,
                    amount,
                    command.payment_method_id,
                    agency.payment_customer_ref if agency else None,
                )
                await self.uow.commit()

                error = await self.charger.charge(
                    payment, f"Subscription {subscription.id} renewal: {plan.name}"
                )
                if error:
                    await self.uow.commit()
                    return Return.err(error)

            subscription.end_date = command.new_end_date
            subscription.status = SubscriptionStatus.ACTIVE
            subscription.is_active = True
            await self.subscription_repo.update(subscription)
            await self.uow.commit()
            logger.info(
                f"Subscription {subscription.id} renewed until {subscription.end_date.isoformat()}"
            )

            return Return.ok(to_subscription_dto(subscription, payment))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RENEW_SUBSCRIPTION_FAILED",
                    message="Failed to renew subscription",
                    reason=str(e),
                )
            )
