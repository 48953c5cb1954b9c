"""Notification Service Implementations

Alerts operators when a refund owed to a customer could not be issued.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.payment import Payment

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """Writes refund alerts to the application log"""

    async def send_refund_failure_alert(self, payment: Payment, reason: str) -> bool:
        logger.warning(
            f"[REFUND ALERT] Payment: {payment.id}, "
            f"Reference: {payment.reference_type.value}/{payment.reference_id}, "
            f"Amount: {payment.amount} {payment.currency}, "
            f"Transaction: {payment.transaction_ref}, Reason: {reason}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    POSTs a JSON payload to the configured URL (chat hook, pager, ticketing).
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_refund_failure_alert(self, payment: Payment, reason: str) -> bool:
        """
        Send refund failure alert via webhook

        Args:
            payment: Payment whose refund failed
            reason: Failure description

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "refund_failure",
            "payment_id": payment.id,
            "reference_type": payment.reference_type.value,
            "reference_id": payment.reference_id,
            "amount": str(payment.amount),
            "currency": payment.currency,
            "transaction_ref": payment.transaction_ref,
            "reason": reason,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
                logger.info(f"Refund alert for payment {payment.id} sent to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send refund alert for payment {payment.id}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_refund_failure_alert(self, payment: Payment, reason: str) -> bool:
        """True if at least one channel delivered the alert"""
        success = False
        for service in self.services:
            try:
                if await service.send_refund_failure_alert(payment, reason):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
