"""Payment Gateway Interface

Capability port for the external payment processor, consumed by the
reservation and subscription use cases.

Failures come in two kinds that callers must treat differently:
- GatewayError: the processor was unreachable or failed (retryable)
- PaymentDeclined: the processor rejected the payment (terminal)
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class PaymentGatewayError(Exception):
    """Base exception for payment gateway failures"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class GatewayError(PaymentGatewayError):
    """Network or provider failure; the request may be retried"""


class PaymentDeclined(PaymentGatewayError):
    """Card or processor rejection; never retried"""


class WebhookSignatureError(PaymentGatewayError):
    """Webhook payload failed signature verification"""


class ChargeStatus:
    SUCCEEDED = "succeeded"
    PROCESSING = "processing"


class ChargeResult(BaseModel):
    """Outcome of a charge the processor accepted"""

    success: bool = Field(..., description="True when funds were captured")
    transaction_ref: str = Field(..., description="External transaction id")
    status: str = Field(
        default=ChargeStatus.SUCCEEDED,
        description="Processor status; 'processing' settles later via webhook",
    )


class RefundResult(BaseModel):
    success: bool
    refund_ref: Optional[str] = None


class PaymentMethodInfo(BaseModel):
    valid: bool
    details: Dict[str, Any] = Field(default_factory=dict)


class WebhookEvent(BaseModel):
    """Verified webhook event, reduced to what reconciliation needs"""

    event_id: str
    event_type: str
    transaction_ref: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)


class PaymentGateway(ABC):
    """
    Abstract payment processor

    Amounts are decimal currency units; adapters convert to the processor's
    minor units.
    """

    @abstractmethod
    async def charge(
        self,
        customer_ref: Optional[str],
        amount: Decimal,
        currency: str,
        method_ref: str,
        idempotency_key: str,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> ChargeResult:
        """
        Charge a payment method

        Args:
            customer_ref: Processor customer id (optional)
            amount: Amount in currency units
            currency: ISO currency code
            method_ref: Processor payment method id
            idempotency_key: Key that makes repeated submissions charge once
            description: Statement description
            metadata: Values echoed back in webhook events

        Returns:
            ChargeResult

        Raises:
            GatewayError: processor unreachable or failing
            PaymentDeclined: payment rejected
        """
        pass

    @abstractmethod
    async def refund(self, transaction_ref: str, amount: Optional[Decimal] = None) -> RefundResult:
        """
        Refund a captured charge, fully when amount is None

        Raises:
            GatewayError, PaymentDeclined
        """
        pass

    @abstractmethod
    async def retrieve_method(self, method_ref: str) -> PaymentMethodInfo:
        pass

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """
        Verify a webhook delivery and parse it

        Raises:
            WebhookSignatureError: signature or payload invalid
        """
        pass
