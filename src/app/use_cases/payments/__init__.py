"""Payment use cases"""
from .reconcile_payment_event import ReconcilePaymentEvent
from .refund_payment import RefundPayment
from .get_payment import GetPayment
from .validate_payment_method import ValidatePaymentMethod
from .expire_stale_payments import ExpireStalePayments
from .dtos import (
    PaymentResponseDTO,
    PaymentListResponseDTO,
    RefundPaymentCommandDTO,
    PaymentMethodResponseDTO,
    WebhookReconcileResultDTO,
    ExpireStalePaymentsResultDTO,
)

__all__ = [
    "ReconcilePaymentEvent",
    "RefundPayment",
    "GetPayment",
    "ValidatePaymentMethod",
    "ExpireStalePayments",
    "PaymentResponseDTO",
    "PaymentListResponseDTO",
    "RefundPaymentCommandDTO",
    "PaymentMethodResponseDTO",
    "WebhookReconcileResultDTO",
    "ExpireStalePaymentsResultDTO",
]
