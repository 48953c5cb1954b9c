"""Stripe Payment Gateway

PaymentGateway adapter backed by Stripe PaymentIntents. The Stripe SDK is
synchronous, so every call runs in a worker thread under a timeout.
"""

import asyncio
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional
import stripe

from src.app.services.payment_gateway import (
    ChargeResult,
    ChargeStatus,
    GatewayError,
    PaymentDeclined,
    PaymentGateway,
    PaymentMethodInfo,
    RefundResult,
    WebhookEvent,
    WebhookSignatureError,
)

logger = logging.getLogger(__name__)

# Stripe errors that mean the request itself was rejected
_DECLINE_ERRORS = (stripe.CardError, stripe.InvalidRequestError)


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))


class StripePaymentGateway(PaymentGateway):
    """
    Stripe implementation of PaymentGateway

    Error mapping:
    - CardError, InvalidRequestError -> PaymentDeclined
    - connection, rate limit, API and timeout failures -> GatewayError
    - bad webhook signature or payload -> WebhookSignatureError
    """

    def __init__(self, api_key: str, webhook_secret: str, timeout: float = 30.0):
        self._api_key = api_key
        self._webhook_secret = webhook_secret
        self.timeout = timeout

    async def _call(self, operation_name: str, operation, **kwargs) -> Any:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(operation, api_key=self._api_key, **kwargs),
                timeout=self.timeout,
            )
        except _DECLINE_ERRORS as e:
            logger.info(f"Stripe {operation_name} declined: {e.user_message or e}")
            raise PaymentDeclined(e.user_message or str(e), code=e.code)
        except asyncio.TimeoutError:
            raise GatewayError(f"Stripe {operation_name} timed out after {self.timeout}s")
        except stripe.StripeError as e:
            logger.warning(f"Stripe {operation_name} failed: {e}")
            raise GatewayError(str(e), code=e.code)

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
        params: Dict[str, Any] = {
            "amount": to_minor_units(amount),
            "currency": currency.lower(),
            "payment_method": method_ref,
            "confirm": True,
            "automatic_payment_methods": {"enabled": True, "allow_redirects": "never"},
            "metadata": metadata or {},
            "idempotency_key": idempotency_key,
        }
        if customer_ref:
            params["customer"] = customer_ref
        if description:
            params["description"] = description

        intent = await self._call("charge", stripe.PaymentIntent.create, **params)

        if intent.status == "succeeded":
            logger.info(f"Stripe charge {intent.id} succeeded for {amount} {currency}")
            return ChargeResult(success=True, transaction_ref=intent.id)

        if intent.status == "processing":
            logger.info(f"Stripe charge {intent.id} is processing")
            return ChargeResult(
                success=False, transaction_ref=intent.id, status=ChargeStatus.PROCESSING
            )

        # requires_action, requires_payment_method, canceled
        raise PaymentDeclined(
            f"Payment not completed (status: {intent.status})", code=intent.status
        )

    async def refund(self, transaction_ref: str, amount: Optional[Decimal] = None) -> RefundResult:
        params: Dict[str, Any] = {"payment_intent": transaction_ref}
        if amount is not None:
            params["amount"] = to_minor_units(amount)

        refund = await self._call("refund", stripe.Refund.create, **params)
        logger.info(f"Stripe refund {refund.id} for {transaction_ref}: {refund.status}")
        return RefundResult(
            success=refund.status in ("succeeded", "pending"),
            refund_ref=refund.id,
        )

    async def retrieve_method(self, method_ref: str) -> PaymentMethodInfo:
        try:
            method = await self._call("retrieve_method", stripe.PaymentMethod.retrieve, id=method_ref)
        except PaymentDeclined:
            return PaymentMethodInfo(valid=False)

        details: Dict[str, Any] = {"type": method.type}
        card = getattr(method, "card", None)
        if card is not None:
            details.update(
                brand=card.brand,
                last4=card.last4,
                exp_month=card.exp_month,
                exp_year=card.exp_year,
            )
        return PaymentMethodInfo(valid=True, details=details)

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except ValueError as e:
            raise WebhookSignatureError(f"Invalid payload: {e}")
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(f"Invalid signature: {e}")

        obj = event["data"]["object"]
        metadata = obj.get("metadata") or {}
        transaction_ref = obj.get("payment_intent") if obj.get("object") == "charge" else obj.get("id")

        return WebhookEvent(
            event_id=event["id"],
            event_type=event["type"],
            transaction_ref=transaction_ref,
            metadata={str(k): str(v) for k, v in dict(metadata).items()},
        )
