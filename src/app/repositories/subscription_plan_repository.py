"""Subscription Plan Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.subscription_plan import SubscriptionPlan


class SubscriptionPlanRepository(ABC):

    @abstractmethod
    async def get_by_id(self, plan_id: int) -> Optional[SubscriptionPlan]:
        pass

    @abstractmethod
    async def list_active(self) -> List[SubscriptionPlan]:
        pass

    @abstractmethod
    async def create(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        pass

    @abstractmethod
    async def update(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        pass
