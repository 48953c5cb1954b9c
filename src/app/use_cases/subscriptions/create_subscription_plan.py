"""CreateSubscriptionPlan and ListSubscriptionPlans Use Cases"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.subscription_plan_repository import SubscriptionPlanRepository
from src.domain.subscription_plan import SubscriptionPlan
from .dtos import (
    CreateSubscriptionPlanCommandDTO,
    SubscriptionPlanListResponseDTO,
    SubscriptionPlanResponseDTO,
)
from .mappers import to_plan_dto


class CreateSubscriptionPlan:

    def __init__(self, uow: UnitOfWork, plan_repo: SubscriptionPlanRepository):
        self.uow = uow
        self.plan_repo = plan_repo

    async def execute(
        self, command: CreateSubscriptionPlanCommandDTO
    ) -> Result[SubscriptionPlanResponseDTO]:
        try:
            plan = await self.plan_repo.create(
                SubscriptionPlan(
                    name=command.name,
                    description=command.description,
                    monthly_price=command.monthly_price,
                    yearly_price=command.yearly_price,
                    features=command.features,
                    is_active=command.is_active,
                )
            )
            await self.uow.commit()
            return Return.ok(to_plan_dto(plan))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_PLAN_FAILED",
                    message="Failed to create subscription plan",
                    reason=str(e),
                )
            )


class ListSubscriptionPlans:
    """Lists plans currently offered, cheapest first"""

    def __init__(self, plan_repo: SubscriptionPlanRepository):
        self.plan_repo = plan_repo

    async def execute(self) -> Result[SubscriptionPlanListResponseDTO]:
        try:
            plans = await self.plan_repo.list_active()
            return Return.ok(
                SubscriptionPlanListResponseDTO(
                    plans=[to_plan_dto(p) for p in plans],
                    total=len(plans),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_PLANS_FAILED",
                    message="Failed to list subscription plans",
                    reason=str(e),
                )
            )
