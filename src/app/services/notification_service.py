"""Notification Service Interface

Defines the contract for alerting operators about payment problems that need
manual follow-up.
"""

from abc import ABC, abstractmethod
from src.domain.payment import Payment


class NotificationService(ABC):
    """
    Abstract notification service for sending alerts

    Implementations can send notifications via:
    - Webhook (HTTP POST)
    - Logging
    """

    @abstractmethod
    async def send_refund_failure_alert(self, payment: Payment, reason: str) -> bool:
        """
        Send alert for a refund that could not be issued

        Args:
            payment: Payment whose refund failed
            reason: Failure description

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
