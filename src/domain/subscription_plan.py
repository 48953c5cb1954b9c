"""Subscription Plan Domain Entity

Catalogue of plans agencies subscribe to.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional
from sqlmodel import Field, Column
from sqlalchemy import JSON, Numeric, String
from src.domain.base import BaseModel, IdType

# Billing periods up to this many days are charged the monthly price
MONTHLY_BILLING_MAX_DAYS = 32


class SubscriptionPlan(BaseModel, table=True):
    """
    SubscriptionPlan - Priced plan offered to agencies

    Domain Rules:
    - monthly_price and yearly_price are both required
    - Deactivated plans stay referenced by existing subscriptions
    """

    __tablename__ = "subscription_plans"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    name: str = Field(sa_column=Column(String(100), nullable=False))

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
    )

    monthly_price: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))

    yearly_price: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))

    features: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def price_for_period(self, start_date: datetime, end_date: datetime) -> Decimal:
        """Price a billing period by its length.

        Periods of at most MONTHLY_BILLING_MAX_DAYS days are charged the
        monthly price, anything longer the yearly price.
        """
        duration_days = (end_date - start_date) / timedelta(days=1)
        if duration_days <= MONTHLY_BILLING_MAX_DAYS:
            return Decimal(self.monthly_price)
        return Decimal(self.yearly_price)
