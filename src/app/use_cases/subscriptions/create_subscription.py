"""CreateSubscription Use Case

Subscribes an agency to a plan, charging the period price when a payment
method is supplied.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.payment_refunder import PaymentRefunder
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.user_repository import UserRepository
from src.domain.payment import Payment, PaymentStatus
from src.domain.subscription import Subscription, SubscriptionStatus
from src.domain.user import UserRole
from .charging import SubscriptionCharger
from .dtos import CreateSubscriptionCommandDTO, SubscriptionResponseDTO
from .mappers import to_subscription_dto

logger = logging.getLogger(__name__)


class CreateSubscription:
    """
    Use Case: Create a subscription

    Business Rules:
    1. Plan and agency must exist
    2. end_date must be after start_date
    3. An agency has at most one current subscription (active, or pending
       on its first charge)
    4. Price: monthly for periods up to 32 days, yearly beyond
    5. A failed or interrupted charge removes the subscription (the failed
       payment is kept)
    6. A paid subscription stays pending and inactive until its charge
       settles; a charge still processing is settled by the payment webhook
    7. A capture for a subscription cancelled while it was charged is refunded
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
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.plan_repo = plan_repo
        self.subscription_repo = subscription_repo
        self.payment_repo = payment_repo
        self.charger = SubscriptionCharger(payment_repo, payment_gateway, currency)
        self.refunder = PaymentRefunder(payment_repo, payment_gateway, notification_service)

    async def execute(
        self, command: CreateSubscriptionCommandDTO, now: Optional[datetime] = None
    ) -> Result[SubscriptionResponseDTO]:
        now = now or datetime.utcnow()

        try:
            plan = await self.plan_repo.get_by_id(command.plan_id)
            if not plan:
                return Return.err(
                    Error(
                        code="PLAN_NOT_FOUND",
                        message=f"Subscription plan {command.plan_id} not found",
                    )
                )

            agency = await self.user_repo.get_by_id(command.agency_id)
            if not agency or agency.role != UserRole.AGENCY:
                return Return.err(
                    Error(
                        code="AGENCY_NOT_FOUND",
                        message=f"Agency {command.agency_id} not found",
                    )
                )

            if command.end_date <= command.start_date:
                return Return.err(
                    Error(code="INVALID_INPUT", message="end_date must be after start_date")
                )

            current = await self.subscription_repo.get_current_for_agency(agency.id, now)
            if current:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_ALREADY_ACTIVE",
                        message=f"Agency {agency.id} already has active subscription {current.id}",
                    )
                )

            paid = bool(command.payment_method_id)
            subscription = await self.subscription_repo.create(
                Subscription(
                    agency_id=agency.id,
                    plan_id=plan.id,
                    start_date=command.start_date,
                    end_date=command.end_date,
                    is_active=not paid,
                    status=SubscriptionStatus.PENDING if paid else SubscriptionStatus.ACTIVE,
                    auto_renew=command.auto_renew,
                )
            )

            if not paid:
                await self.uow.commit()
                logger.info(
                    f"Agency {agency.id} subscribed to plan {plan.id} "
                    f"until {subscription.end_date.isoformat()}"
                )
                return Return.ok(to_subscription_dto(subscription))

            amount = plan.price_for_period(command.start_date, command.end_date)
            payment = await self.charger.open(
                subscription, amount, command.payment_method_id, agency.payment_customer_ref
            )
            await self.uow.commit()

            subscription_id, payment_id = subscription.id, payment.id
            outcome_recorded = False
            try:
                error = await self.charger.charge(
                    payment, f"Subscription {subscription_id}: {plan.name}"
                )
                if error:
                    await self.subscription_repo.delete(subscription)
                    await self.uow.commit()
                    outcome_recorded = True
                    return Return.err(error)

                result = await self._settle(subscription_id, payment)
                outcome_recorded = True
                return result
            finally:
                if not outcome_recorded:
                    await self._abandon(subscription_id, payment_id)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_SUBSCRIPTION_FAILED",
                    message="Failed to create subscription",
                    reason=str(e),
                )
            )

    async def _settle(self, subscription_id: int, payment: Payment) -> Result[SubscriptionResponseDTO]:
        subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)

        if subscription is not None and subscription.status == SubscriptionStatus.PENDING:
            if payment.status == PaymentStatus.COMPLETED:
                subscription.status = SubscriptionStatus.ACTIVE
                subscription.is_active = True
                await self.subscription_repo.update(subscription)
                logger.info(
                    f"Agency {subscription.agency_id} subscribed to plan {subscription.plan_id} "
                    f"until {subscription.end_date.isoformat()}"
                )
            else:
                logger.info(
                    f"Subscription {subscription_id} awaiting settlement of {payment.transaction_ref}"
                )
            await self.uow.commit()
            return Return.ok(to_subscription_dto(subscription, payment))

        await self.uow.commit()
        if subscription is None:
            return Return.err(
                Error(
                    code="CREATE_SUBSCRIPTION_FAILED",
                    message=f"Subscription {subscription_id} no longer exists",
                )
            )

        if subscription.status == SubscriptionStatus.CANCELLED and payment.status == PaymentStatus.COMPLETED:
            logger.warning(
                f"Subscription {subscription_id} was cancelled while payment {payment.id} was charged"
            )
            await self.refunder.refund(payment, f"cancelled subscription {subscription_id}")
            await self.uow.commit()
        return Return.ok(to_subscription_dto(subscription, payment))

    async def _abandon(self, subscription_id: int, payment_id: int) -> None:
        """Free the agency's slot after a charge that never reached a recorded outcome"""
        try:
            await self.uow.rollback()
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if subscription is not None and subscription.status == SubscriptionStatus.PENDING:
                await self.subscription_repo.delete(subscription)
            payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
            if payment is not None and payment.mark_failed(
                "charge interrupted before its outcome was recorded"
            ):
                await self.payment_repo.update(payment)
            await self.uow.commit()
            logger.warning(f"Released pending subscription {subscription_id} after an interrupted charge")
        except Exception as e:
            logger.error(f"Could not release pending subscription {subscription_id}: {e}")
