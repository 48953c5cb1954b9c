from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .pdf_service import ReportLabPdfService
from .stripe_payment_gateway import StripePaymentGateway
from .retrying_payment_gateway import RetryingPaymentGateway

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "ReportLabPdfService",
    "StripePaymentGateway",
    "RetryingPaymentGateway",
]
