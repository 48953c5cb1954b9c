"""Request schemas for Payment API"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class RefundPaymentRequestSchema(BaseModel):
    """
    Request schema for refunding a payment

    Used for POST /payments/{payment_id}/refund. Omit amount for a full refund.
    """

    amount: Optional[Decimal] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Ensure amount is positive"""
        if v is not None and v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v


class ValidatePaymentMethodRequestSchema(BaseModel):
    payment_method_id: str = Field(..., min_length=1)
