"""Data Transfer Objects for Payment Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class PaymentResponseDTO(BaseModel):
    id: int
    amount: Decimal
    currency: str
    status: str
    reference_type: str
    reference_id: Optional[str] = None
    transaction_ref: Optional[str] = None
    refund_ref: Optional[str] = None
    refunded_amount: Optional[Decimal] = None
    failure_reason: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PaymentListResponseDTO(BaseModel):
    payments: List[PaymentResponseDTO]
    total: int


class RefundPaymentCommandDTO(BaseModel):
    """
    Command DTO for refunding a completed payment

    Omitting amount refunds the full charge.
    """

    amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        description="Amount to refund (defaults to the full amount)"
    )

    class Config:
        json_schema_extra = {"example": {"amount": "25.00"}}


class PaymentMethodResponseDTO(BaseModel):
    method_ref: str
    valid: bool
    details: Dict[str, Any] = Field(default_factory=dict)


class WebhookReconcileResultDTO(BaseModel):
    """
    Outcome of reconciling one webhook delivery

    applied is False for replays, unknown payments and ignored event types.
    """

    event_id: str
    event_type: str
    payment_id: Optional[int] = None
    payment_status: Optional[str] = None
    applied: bool


class ExpireStalePaymentsResultDTO(BaseModel):
    """Summary of one stale-payment expiry pass"""

    payments_checked: int = Field(..., ge=0)
    payments_expired: int = Field(..., ge=0)
    reservations_cancelled: int = Field(..., ge=0)
    subscriptions_cancelled: int = Field(..., ge=0)
    payments_failed: int = Field(..., ge=0)
    cutoff: datetime
    execution_time_ms: int = Field(..., ge=0)
