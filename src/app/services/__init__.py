from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .payment_gateway import (
    PaymentGateway,
    PaymentGatewayError,
    GatewayError,
    PaymentDeclined,
    WebhookSignatureError,
)
from .pdf_service import PdfService
from .inventory_ledger import InventoryLedger
from .payment_refunder import PaymentRefunder
from .vehicle_locks import VehicleLocks

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "PaymentGateway",
    "PaymentGatewayError",
    "GatewayError",
    "PaymentDeclined",
    "WebhookSignatureError",
    "PdfService",
    "InventoryLedger",
    "PaymentRefunder",
    "VehicleLocks",
]
