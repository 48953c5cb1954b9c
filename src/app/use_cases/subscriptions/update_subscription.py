"""UpdateSubscription Use Case"""

from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import SubscriptionStatus
from .dtos import SubscriptionResponseDTO, UpdateSubscriptionCommandDTO
from .mappers import to_subscription_dto


class UpdateSubscription:
    """
    Use Case: Change plan, end date or flags of a subscription

    Business Rules:
    1. A new plan must exist
    2. end_date must stay after start_date
    3. Setting is_active keeps status in step (inactive means cancelled)
    4. A subscription still waiting on its first charge cannot be activated
       by hand
    5. An update that leaves the subscription active and unexpired may not
       give the agency a second current subscription
    """

    def __init__(
        self,
        uow: UnitOfWork,
        plan_repo: SubscriptionPlanRepository,
        subscription_repo: SubscriptionRepository,
    ):
        self.uow = uow
        self.plan_repo = plan_repo
        self.subscription_repo = subscription_repo

    async def execute(
        self,
        subscription_id: int,
        command: UpdateSubscriptionCommandDTO,
        now: Optional[datetime] = None,
    ) -> Result[SubscriptionResponseDTO]:
        now = now or datetime.utcnow()

        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id, for_update=True)
            if not subscription:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message=f"Subscription {subscription_id} not found",
                    )
                )

            if command.plan_id is not None and command.plan_id != subscription.plan_id:
                plan = await self.plan_repo.get_by_id(command.plan_id)
                if not plan:
                    return Return.err(
                        Error(
                            code="PLAN_NOT_FOUND",
                            message=f"Subscription plan {command.plan_id} not found",
                        )
                    )
                subscription.plan_id = plan.id

            if command.end_date is not None:
                if command.end_date <= subscription.start_date:
                    return Return.err(
                        Error(code="INVALID_INPUT", message="end_date must be after start_date")
                    )
                subscription.end_date = command.end_date

            if command.is_active is not None:
                if command.is_active and subscription.status == SubscriptionStatus.PENDING:
                    return Return.err(
                        Error(
                            code="INVALID_STATE",
                            message=f"Subscription {subscription.id} is awaiting its payment",
                        )
                    )
                subscription.is_active = command.is_active
                subscription.status = (
                    SubscriptionStatus.ACTIVE if command.is_active else SubscriptionStatus.CANCELLED
                )

            if command.auto_renew is not None:
                subscription.auto_renew = command.auto_renew

            if subscription.is_current(now):
                other = await self.subscription_repo.get_current_for_agency(
                    subscription.agency_id, now, exclude_id=subscription.id
                )
                if other:
                    await self.uow.rollback()
                    return Return.err(
                        Error(
                            code="SUBSCRIPTION_ALREADY_ACTIVE",
                            message=f"Agency {subscription.agency_id} already has active subscription {other.id}",
                        )
                    )

            await self.subscription_repo.update(subscription)
            await self.uow.commit()

            return Return.ok(to_subscription_dto(subscription))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_SUBSCRIPTION_FAILED",
                    message="Failed to update subscription",
                    reason=str(e),
                )
            )
