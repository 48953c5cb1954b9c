"""Data Transfer Objects for Subscription Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateSubscriptionPlanCommandDTO(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    description: Optional[str] = Field(default=None, max_length=500)

    monthly_price: Decimal = Field(..., gt=0)

    yearly_price: Decimal = Field(..., gt=0)

    features: List[str] = Field(default_factory=list)

    is_active: bool = Field(default=True)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Fleet Pro",
                "description": "Unlimited listings and priority placement",
                "monthly_price": "49.00",
                "yearly_price": "490.00",
                "features": ["unlimited_vehicles", "priority_listing"],
            }
        }


class SubscriptionPlanResponseDTO(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    monthly_price: Decimal
    yearly_price: Decimal
    features: List[str]
    is_active: bool
    created_at: datetime


class SubscriptionPlanListResponseDTO(BaseModel):
    plans: List[SubscriptionPlanResponseDTO]
    total: int


class CreateSubscriptionCommandDTO(BaseModel):
    """
    Command DTO for subscribing an agency to a plan

    When payment_method_id is given the plan price for the period is charged:
    the monthly price for periods up to 32 days, the yearly price otherwise.
    """

    agency_id: int = Field(..., description="Subscribing agency")

    plan_id: int = Field(..., description="Plan to subscribe to")

    start_date: datetime

    end_date: datetime

    auto_renew: bool = Field(default=True)

    payment_method_id: Optional[str] = Field(
        default=None,
        description="Gateway payment method to charge; omit for unpaid subscriptions"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "agency_id": 7,
                "plan_id": 1,
                "start_date": "2025-07-01T00:00:00",
                "end_date": "2025-08-01T00:00:00",
                "auto_renew": True,
                "payment_method_id": "pm_card_visa",
            }
        }


class RenewSubscriptionCommandDTO(BaseModel):
    new_end_date: datetime = Field(..., description="Must be after the current end date")

    payment_method_id: Optional[str] = Field(
        default=None,
        description="Gateway payment method to charge for the extension"
    )


class UpdateSubscriptionCommandDTO(BaseModel):
    """Partial update; omitted fields keep their value"""

    plan_id: Optional[int] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    auto_renew: Optional[bool] = None


class SubscriptionResponseDTO(BaseModel):
    id: int
    agency_id: int
    plan_id: int
    start_date: datetime
    end_date: datetime
    status: str
    is_active: bool
    auto_renew: bool
    payment_id: Optional[int] = None
    amount_charged: Optional[Decimal] = None
    created_at: datetime
    updated_at: datetime


class UpdateSubscriptionPlanCommandDTO(BaseModel):
    """Partial update; omitted fields keep their value"""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    monthly_price: Optional[Decimal] = Field(default=None, gt=0)
    yearly_price: Optional[Decimal] = Field(default=None, gt=0)
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None


class SubscriptionListResponseDTO(BaseModel):
    subscriptions: List[SubscriptionResponseDTO]
    total: int
