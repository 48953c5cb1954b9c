"""Charging helper shared by subscription creation and renewal"""

import logging
from decimal import Decimal
from typing import Optional
from libs.result import Error
from src.app.services.payment_gateway import GatewayError, PaymentDeclined, PaymentGateway
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.base import generate_uuid
from src.domain.payment import Payment, PaymentReferenceType
from src.domain.subscription import Subscription

logger = logging.getLogger(__name__)


class SubscriptionCharger:
    """
    Records a pending payment for a subscription period and charges it

    The caller commits between open() and charge() so the pending row
    survives a crash during the gateway call.
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        payment_gateway: PaymentGateway,
        currency: str = "USD",
    ):
        self.payment_repo = payment_repo
        self.payment_gateway = payment_gateway
        self.currency = currency

    async def open(
        self,
        subscription: Subscription,
        amount: Decimal,
        method_ref: str,
        customer_ref: Optional[str],
    ) -> Payment:
        return await self.payment_repo.create(
            Payment(
                amount=amount,
                currency=self.currency,
                reference_type=PaymentReferenceType.SUBSCRIPTION,
                reference_id=str(subscription.id),
                idempotency_key=generate_uuid(),
                payment_method_ref=method_ref,
                customer_ref=customer_ref,
            )
        )

    async def charge(self, payment: Payment, description: str) -> Optional[Error]:
        """
        Charge an open payment

        The outcome is written to the payment row re-read under a row lock,
        so a webhook that settled it first is not overwritten. Callers tell
        success from processing by payment.status (completed vs pending).

        Returns:
            None on success or while the gateway is still processing,
            PAYMENT_DECLINED / PAYMENT_FAILED error otherwise
        """
        try:
            result = await self.payment_gateway.charge(
                payment.customer_ref,
                payment.amount,
                payment.currency,
                payment.payment_method_ref,
                payment.idempotency_key,
                description=description,
                metadata={
                    "payment_id": str(payment.id),
                    "subscription_id": payment.reference_id,
                },
            )
        except PaymentDeclined as e:
            logger.warning(f"Subscription charge {payment.id} declined: {e.message}")
            payment = await self._locked(payment)
            payment.mark_failed(e.message)
            await self.payment_repo.update(payment)
            return Error(code="PAYMENT_DECLINED", message="Payment was declined", reason=e.message)
        except GatewayError as e:
            logger.warning(f"Subscription charge {payment.id} failed: {e.message}")
            payment = await self._locked(payment)
            payment.mark_failed(e.message)
            await self.payment_repo.update(payment)
            return Error(
                code="PAYMENT_FAILED", message="Payment could not be processed", reason=e.message
            )

        payment = await self._locked(payment)
        if result.success:
            payment.mark_completed(result.transaction_ref)
        elif payment.transaction_ref is None:
            payment.transaction_ref = result.transaction_ref
        await self.payment_repo.update(payment)
        return None

    async def _locked(self, payment: Payment) -> Payment:
        current = await self.payment_repo.get_by_id(payment.id, for_update=True)
        return current if current is not None else payment
