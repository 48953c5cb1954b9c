"""SQLAlchemy Subscription Repository Implementation

Implements subscription persistence using SQLAlchemy async session.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import func, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import Subscription, SubscriptionStatus


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """
    SQLAlchemy implementation of SubscriptionRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, subscription_id: int, for_update: bool = False) -> Optional[Subscription]:
        statement = select(Subscription).where(Subscription.id == subscription_id)
        if for_update:
            statement = statement.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_current_for_agency(
        self, agency_id: int, now: datetime, exclude_id: Optional[int] = None
    ) -> Optional[Subscription]:
        """
        Retrieve the agency's active (or awaiting payment), non-expired subscription

        Args:
            agency_id: Agency user ID
            now: Reference time for expiry
            exclude_id: Subscription ID to ignore

        Returns:
            Subscription if found, None otherwise
        """
        statement = select(Subscription).where(
            Subscription.agency_id == agency_id,
            or_(
                Subscription.is_active == True,  # noqa: E712
                Subscription.status == SubscriptionStatus.PENDING,
            ),
            Subscription.end_date > now,
        )

        if exclude_id is not None:
            statement = statement.where(Subscription.id != exclude_id)

        result = await self.session.execute(statement.order_by(Subscription.end_date.desc()))
        return result.scalars().first()

    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription with generated ID
        """
        self.session.add(subscription)
        await self.session.flush()
        await self.session.refresh(subscription)
        return subscription

    async def update(self, subscription: Subscription) -> Subscription:
        subscription.updated_at = datetime.utcnow()
        self.session.add(subscription)
        await self.session.flush()
        return subscription

    async def delete(self, subscription: Subscription) -> None:
        await self.session.delete(subscription)
        await self.session.flush()

    async def list_all(
        self, agency_id: Optional[int] = None, status: Optional[SubscriptionStatus] = None
    ) -> List[Subscription]:
        statement = select(Subscription)
        if agency_id is not None:
            statement = statement.where(Subscription.agency_id == agency_id)
        if status is not None:
            statement = statement.where(Subscription.status == status)
        statement = statement.order_by(Subscription.created_at.desc(), Subscription.id.desc())
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_holding_plan(self, plan_id: int) -> int:
        statement = select(func.count()).select_from(Subscription).where(
            Subscription.plan_id == plan_id,
            or_(
                Subscription.is_active == True,  # noqa: E712
                Subscription.status == SubscriptionStatus.PENDING,
            ),
        )
        result = await self.session.execute(statement)
        return result.scalar_one()
