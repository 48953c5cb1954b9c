"""Request schemas for Subscription API"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from .common import to_naive_utc


class CreateSubscriptionPlanRequestSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    description: Optional[str] = Field(default=None, max_length=500)

    monthly_price: Decimal

    yearly_price: Decimal

    features: List[str] = Field(default_factory=list)

    is_active: bool = True

    @field_validator('monthly_price', 'yearly_price')
    @classmethod
    def validate_price(cls, v):
        """Ensure prices are positive"""
        if v <= 0:
            raise ValueError("Price must be greater than 0")
        return v


class CreateSubscriptionRequestSchema(BaseModel):
    """
    Request schema for subscribing an agency

    Used for POST /subscriptions endpoint.
    """

    agency_id: int

    plan_id: int

    start_date: datetime

    end_date: datetime

    auto_renew: bool = True

    payment_method_id: Optional[str] = None

    @field_validator('start_date', 'end_date')
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

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


class RenewSubscriptionRequestSchema(BaseModel):
    new_end_date: datetime

    payment_method_id: Optional[str] = None

    @field_validator('new_end_date')
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class UpdateSubscriptionRequestSchema(BaseModel):
    plan_id: Optional[int] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    auto_renew: Optional[bool] = None

    @field_validator('end_date')
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)


class UpdateSubscriptionPlanRequestSchema(BaseModel):
    """Used for PATCH /subscription-plans/{plan_id}. Omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)

    description: Optional[str] = Field(default=None, max_length=500)

    monthly_price: Optional[Decimal] = None

    yearly_price: Optional[Decimal] = None

    features: Optional[List[str]] = None

    is_active: Optional[bool] = None

    @field_validator('monthly_price', 'yearly_price')
    @classmethod
    def validate_price(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Price must be greater than 0")
        return v
