"""Payment Refunder

Full refunds of captured charges, shared by cancellation and by the paths
that find a capture whose reservation is gone.
"""

import logging
from typing import Optional, Tuple
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway, PaymentGatewayError, RefundResult
from src.domain.payment import Payment, PaymentStatus

logger = logging.getLogger(__name__)


class PaymentRefunder:
    """
    Refund service

    Rules:
    - A refund the gateway refuses (or that cannot be attempted) raises an
      operator alert and is reported back as a reason string, never as an
      exception
    - Only a refund the gateway accepted is recorded on the payment
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        payment_gateway: Optional[PaymentGateway],
        notification_service: Optional[NotificationService] = None,
    ):
        self.payment_repo = payment_repo
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service

    async def issue(self, payment: Payment, context: str) -> Tuple[Optional[RefundResult], Optional[str]]:
        """
        Ask the gateway to refund the payment in full

        Args:
            payment: Completed payment
            context: What the refund is for, used in logs

        Returns:
            (RefundResult, None) when accepted, (None, reason) otherwise
        """
        if not payment.transaction_ref:
            reason = "payment has no gateway transaction"
        elif self.payment_gateway is None:
            reason = "no payment gateway configured"
        else:
            try:
                refund = await self.payment_gateway.refund(payment.transaction_ref)
                if refund.success:
                    return refund, None
                reason = "gateway did not accept the refund"
            except PaymentGatewayError as e:
                reason = e.message

        logger.warning(f"Refund of payment {payment.id} ({context}) failed: {reason}")
        if self.notification_service:
            await self.notification_service.send_refund_failure_alert(payment, reason)
        return None, reason

    @staticmethod
    def record(payment: Payment, refund: RefundResult) -> None:
        payment.status = PaymentStatus.REFUNDED
        payment.refund_ref = refund.refund_ref
        payment.refunded_amount = payment.amount

    async def refund(self, payment: Payment, context: str) -> Optional[str]:
        """Issue and record a full refund. Returns the failure reason, or None on success."""
        refund, reason = await self.issue(payment, context)
        if refund is None:
            return reason

        self.record(payment, refund)
        await self.payment_repo.update(payment)
        logger.info(f"Refunded payment {payment.id} ({refund.refund_ref}) for {context}")
        return None
