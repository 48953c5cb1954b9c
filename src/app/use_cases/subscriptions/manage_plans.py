"""GetSubscriptionPlan / UpdateSubscriptionPlan / DeleteSubscriptionPlan Use Cases"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from .dtos import SubscriptionPlanResponseDTO, UpdateSubscriptionPlanCommandDTO
from .mappers import to_plan_dto

logger = logging.getLogger(__name__)


def _not_found(plan_id: int) -> Error:
    return Error(code="PLAN_NOT_FOUND", message=f"Subscription plan {plan_id} not found")


class GetSubscriptionPlan:

    def __init__(self, plan_repo: SubscriptionPlanRepository):
        self.plan_repo = plan_repo

    async def execute(self, plan_id: int) -> Result[SubscriptionPlanResponseDTO]:
        try:
            plan = await self.plan_repo.get_by_id(plan_id)
            if not plan:
                return Return.err(_not_found(plan_id))
            return Return.ok(to_plan_dto(plan))

        except Exception as e:
            return Return.err(
                Error(code="GET_PLAN_FAILED", message="Failed to retrieve subscription plan", reason=str(e))
            )


class UpdateSubscriptionPlan:
    """Price changes apply to future charges only; existing payments keep their amounts"""

    def __init__(self, uow: UnitOfWork, plan_repo: SubscriptionPlanRepository):
        self.uow = uow
        self.plan_repo = plan_repo

    async def execute(
        self, plan_id: int, command: UpdateSubscriptionPlanCommandDTO
    ) -> Result[SubscriptionPlanResponseDTO]:
        try:
            plan = await self.plan_repo.get_by_id(plan_id)
            if not plan:
                return Return.err(_not_found(plan_id))

            for field, value in command.model_dump(exclude_none=True).items():
                setattr(plan, field, value)

            plan = await self.plan_repo.update(plan)
            await self.uow.commit()

            return Return.ok(to_plan_dto(plan))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="UPDATE_PLAN_FAILED", message="Failed to update subscription plan", reason=str(e))
            )


class DeleteSubscriptionPlan:
    """
    Use Case: Withdraw a plan

    The plan is deactivated rather than removed so past subscriptions keep
    their reference. A plan still held by an active or pending subscription
    cannot be withdrawn.
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

    async def execute(self, plan_id: int) -> Result[None]:
        try:
            plan = await self.plan_repo.get_by_id(plan_id)
            if not plan:
                return Return.err(_not_found(plan_id))

            holders = await self.subscription_repo.count_holding_plan(plan_id)
            if holders > 0:
                return Return.err(
                    Error(
                        code="PLAN_IN_USE",
                        message=f"Subscription plan {plan_id} has {holders} active subscription(s)",
                    )
                )

            plan.is_active = False
            await self.plan_repo.update(plan)
            await self.uow.commit()
            logger.info(f"Subscription plan {plan_id} withdrawn")

            return Return.ok(None)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="DELETE_PLAN_FAILED", message="Failed to delete subscription plan", reason=str(e))
            )
