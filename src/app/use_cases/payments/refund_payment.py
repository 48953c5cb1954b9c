"""RefundPayment Use Case

Refunds a completed payment in full or in part.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.payment_gateway import GatewayError, PaymentDeclined, PaymentGateway
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import PaymentStatus
from .dtos import PaymentResponseDTO, RefundPaymentCommandDTO
from .get_payment import to_payment_dto

logger = logging.getLogger(__name__)


class RefundPayment:
    """
    Use Case: Refund a payment

    Business Rules:
    1. Only completed payments can be refunded
    2. Amount defaults to the full charge and cannot exceed it
    3. Partial amount -> partially_refunded, full amount -> refunded
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        payment_gateway: PaymentGateway,
    ):
        self.uow = uow
        self.payment_repo = payment_repo
        self.payment_gateway = payment_gateway

    async def execute(
        self, payment_id: int, command: Optional[RefundPaymentCommandDTO] = None
    ) -> Result[PaymentResponseDTO]:
        try:
            payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
            if not payment:
                return Return.err(
                    Error(code="PAYMENT_NOT_FOUND", message=f"Payment {payment_id} not found")
                )

            if payment.status != PaymentStatus.COMPLETED:
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message=f"Only completed payments can be refunded. "
                                f"Current status: {payment.status.value}",
                    )
                )

            amount: Decimal = payment.amount
            if command and command.amount is not None:
                if command.amount > payment.amount:
                    return Return.err(
                        Error(
                            code="INVALID_INPUT",
                            message=f"Refund amount {command.amount} exceeds payment amount {payment.amount}",
                        )
                    )
                amount = command.amount

            partial = amount < payment.amount

            try:
                refund = await self.payment_gateway.refund(
                    payment.transaction_ref, amount if partial else None
                )
            except PaymentDeclined as e:
                return Return.err(
                    Error(code="PAYMENT_DECLINED", message="Refund was rejected", reason=e.message)
                )
            except GatewayError as e:
                return Return.err(
                    Error(code="PAYMENT_FAILED", message="Refund could not be processed", reason=e.message)
                )

            if not refund.success:
                return Return.err(
                    Error(code="PAYMENT_FAILED", message="Refund could not be processed")
                )

            payment.status = PaymentStatus.PARTIALLY_REFUNDED if partial else PaymentStatus.REFUNDED
            payment.refund_ref = refund.refund_ref
            payment.refunded_amount = amount
            payment.updated_at = datetime.utcnow()
            await self.payment_repo.update(payment)
            await self.uow.commit()

            logger.info(f"Payment {payment.id} {payment.status.value}: {amount} {payment.currency}")
            return Return.ok(to_payment_dto(payment))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REFUND_PAYMENT_FAILED",
                    message="Failed to refund payment",
                    reason=str(e),
                )
            )
