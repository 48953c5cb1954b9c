"""Subscription Domain Entity

Tracks an agency's subscription to a plan.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, DateTime
from src.domain.base import BaseModel, IdType


class SubscriptionStatus(str, Enum):
    """Subscription status types"""
    PENDING = "pending"
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Subscription(BaseModel, table=True):
    """
    Subscription - Agency plan membership

    Domain Rules:
    - Status transitions: pending -> active once the first charge settles,
      pending/active -> cancelled, renewal reactivates
    - A pending subscription is inactive but still counts as the agency's
      current one
    - At most one is_active subscription with end_date in the future per
      agency (enforced at business logic layer)
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index('ix_subscriptions_agency_id', 'agency_id'),
        Index('ix_subscriptions_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique subscription identifier (auto-increment)"
    )

    agency_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=False),
        description="Subscribed agency"
    )

    plan_id: int = Field(
        sa_column=Column(IdType, ForeignKey("subscription_plans.id"), nullable=False),
        description="Subscribed plan"
    )

    start_date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    end_date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    is_active: bool = Field(default=True)

    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.ACTIVE,
        description="Subscription status (pending, active, cancelled)"
    )

    auto_renew: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def is_current(self, now: datetime) -> bool:
        holds_slot = self.is_active or self.status == SubscriptionStatus.PENDING
        return holds_slot and self.end_date > now
