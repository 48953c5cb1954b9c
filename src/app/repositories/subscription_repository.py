"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.subscription import Subscription, SubscriptionStatus


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    Provides the lookups behind the one-active-subscription-per-agency rule.
    """

    @abstractmethod
    async def get_by_id(self, subscription_id: int, for_update: bool = False) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_current_for_agency(
        self, agency_id: int, now: datetime, exclude_id: Optional[int] = None
    ) -> Optional[Subscription]:
        """
        Retrieve the agency's current subscription

        Matches (is_active = true OR status = pending) AND end_date > now, so a
        subscription awaiting its first payment also holds the agency's slot.

        Args:
            agency_id: Agency user ID
            now: Reference time for expiry
            exclude_id: Subscription ID to ignore (used on renewal)

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription with generated ID
        """
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        pass

    @abstractmethod
    async def delete(self, subscription: Subscription) -> None:
        pass

    @abstractmethod
    async def list_all(
        self, agency_id: Optional[int] = None, status: Optional[SubscriptionStatus] = None
    ) -> List[Subscription]:
        """List subscriptions, newest first, optionally filtered by agency and status"""
        pass

    @abstractmethod
    async def count_holding_plan(self, plan_id: int) -> int:
        """Count subscriptions on the plan that are active or awaiting their first payment"""
        pass
