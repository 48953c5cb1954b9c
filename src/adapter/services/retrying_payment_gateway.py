"""Retrying Payment Gateway

Decorates another PaymentGateway with exponential backoff on transient
failures. Declines and signature errors pass straight through.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable, Dict, Optional, TypeVar

from src.app.services.payment_gateway import (
    ChargeResult,
    GatewayError,
    PaymentGateway,
    PaymentMethodInfo,
    RefundResult,
    WebhookEvent,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryingPaymentGateway(PaymentGateway):
    """
    Retry wrapper around a PaymentGateway

    Only GatewayError is retried. Delay before retry n (0-based) is
    min(base_delay * 2**n, max_delay). Charges are safe to retry because the
    same idempotency_key is sent on every attempt.
    """

    def __init__(
        self,
        inner: PaymentGateway,
        max_attempts: int = 3,
        base_delay: float = 0.5,
        max_delay: float = 8.0,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.inner = inner
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay

    def delay_for(self, attempt: int) -> float:
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    async def _retry_with_backoff(
        self, operation_name: str, operation: Callable[[], Awaitable[T]]
    ) -> T:
        last_exception: Optional[GatewayError] = None

        for attempt in range(self.max_attempts):
            try:
                return await operation()
            except GatewayError as e:
                last_exception = e
                if attempt + 1 >= self.max_attempts:
                    break
                delay = self.delay_for(attempt)
                logger.warning(
                    f"{operation_name} failed: {e.message}. "
                    f"Attempt {attempt + 1}/{self.max_attempts}. Retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)

        logger.error(f"{operation_name} failed after {self.max_attempts} attempts")
        raise last_exception

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
        return await self._retry_with_backoff(
            "charge",
            lambda: self.inner.charge(
                customer_ref,
                amount,
                currency,
                method_ref,
                idempotency_key,
                description=description,
                metadata=metadata,
            ),
        )

    async def refund(self, transaction_ref: str, amount: Optional[Decimal] = None) -> RefundResult:
        return await self._retry_with_backoff(
            "refund", lambda: self.inner.refund(transaction_ref, amount)
        )

    async def retrieve_method(self, method_ref: str) -> PaymentMethodInfo:
        return await self._retry_with_backoff(
            "retrieve_method", lambda: self.inner.retrieve_method(method_ref)
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        return self.inner.construct_webhook_event(payload, signature)
