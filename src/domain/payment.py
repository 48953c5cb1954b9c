"""Payment Domain Entity

Local record of a charge attempt against the payment gateway. The row is
written as pending before the gateway is called so a crash between the
charge and the bookkeeping leaves a recoverable record.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, IdType


class PaymentStatus(str, Enum):
    """Payment states"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class PaymentReferenceType(str, Enum):
    """What a payment settles"""
    RESERVATION = "reservation"
    SUBSCRIPTION = "subscription"


class Payment(BaseModel, table=True):
    """
    Payment - Charge attempt against the gateway

    Domain Rules:
    - idempotency_key is unique and sent with the charge, so a retried
      charge never bills twice
    - transaction_ref is unique once the gateway assigned one
    - Only pending payments move to completed/failed (webhook replays are
      no-ops)
    - Only completed payments can be refunded
    """

    __tablename__ = "payments"
    __table_args__ = (
        Index('ix_payments_reference', 'reference_type', 'reference_id'),
        Index('ix_payments_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique payment identifier (auto-increment)"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Charged amount (precision: 10,2)"
    )

    currency: str = Field(
        default="USD",
        sa_column=Column(String(3), nullable=False),
        description="ISO currency code"
    )

    status: PaymentStatus = Field(
        default=PaymentStatus.PENDING,
        description="Payment status"
    )

    reference_type: PaymentReferenceType = Field(
        description="Kind of entity this payment settles"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="ID of the settled reservation or subscription"
    )

    idempotency_key: str = Field(
        unique=True,
        index=True,
        description="Key sent to the gateway with the charge"
    )

    transaction_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True, index=True),
        description="External transaction id assigned by the gateway"
    )

    refund_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External refund id"
    )

    refunded_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(10, 2), nullable=True),
    )

    payment_method_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Gateway payment method used for the charge"
    )

    customer_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Gateway customer charged"
    )

    failure_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
    )

    paid_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def mark_completed(self, transaction_ref: Optional[str] = None) -> bool:
        """Move a pending payment to completed. Returns False when nothing changed."""
        if self.status != PaymentStatus.PENDING:
            return False
        self.status = PaymentStatus.COMPLETED
        if transaction_ref:
            self.transaction_ref = transaction_ref
        self.paid_at = datetime.utcnow()
        self.updated_at = datetime.utcnow()
        return True

    def mark_failed(self, reason: Optional[str] = None) -> bool:
        """Move a pending payment to failed. Returns False when nothing changed."""
        if self.status != PaymentStatus.PENDING:
            return False
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason
        self.updated_at = datetime.utcnow()
        return True
