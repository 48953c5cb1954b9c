"""ValidatePaymentMethod Use Case"""

from libs.result import Result, Return, Error
from src.app.services.payment_gateway import GatewayError, PaymentGateway
from .dtos import PaymentMethodResponseDTO


class ValidatePaymentMethod:
    """Asks the gateway whether a payment method can be charged"""

    def __init__(self, payment_gateway: PaymentGateway):
        self.payment_gateway = payment_gateway

    async def execute(self, method_ref: str) -> Result[PaymentMethodResponseDTO]:
        try:
            info = await self.payment_gateway.retrieve_method(method_ref)
            return Return.ok(
                PaymentMethodResponseDTO(
                    method_ref=method_ref,
                    valid=info.valid,
                    details=info.details,
                )
            )

        except GatewayError as e:
            return Return.err(
                Error(
                    code="PAYMENT_FAILED",
                    message="Payment gateway unavailable",
                    reason=e.message,
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="VALIDATE_PAYMENT_METHOD_FAILED",
                    message="Failed to validate payment method",
                    reason=str(e),
                )
            )
