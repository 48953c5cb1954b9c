"""GetPayment Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment
from .dtos import PaymentResponseDTO


def to_payment_dto(payment: Payment) -> PaymentResponseDTO:
    return PaymentResponseDTO(
        id=payment.id,
        amount=payment.amount,
        currency=payment.currency,
        status=payment.status.value,
        reference_type=payment.reference_type.value,
        reference_id=payment.reference_id,
        transaction_ref=payment.transaction_ref,
        refund_ref=payment.refund_ref,
        refunded_amount=payment.refunded_amount,
        failure_reason=payment.failure_reason,
        paid_at=payment.paid_at,
        created_at=payment.created_at,
        updated_at=payment.updated_at,
    )


class GetPayment:

    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(self, payment_id: int) -> Result[PaymentResponseDTO]:
        try:
            payment = await self.payment_repo.get_by_id(payment_id)
            if not payment:
                return Return.err(
                    Error(code="PAYMENT_NOT_FOUND", message=f"Payment {payment_id} not found")
                )
            return Return.ok(to_payment_dto(payment))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_PAYMENT_FAILED",
                    message="Failed to retrieve payment",
                    reason=str(e),
                )
            )
