"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.payment import Payment, PaymentReferenceType


class PaymentRepository(ABC):
    """
    Repository interface for Payment persistence

    Lookups accept for_update so webhook reconciliation and the synchronous
    charge path serialize on the payment row.
    """

    @abstractmethod
    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        pass

    @abstractmethod
    async def get_by_transaction_ref(
        self, transaction_ref: str, for_update: bool = False
    ) -> Optional[Payment]:
        """
        Retrieve payment by the gateway's transaction id

        Args:
            transaction_ref: External transaction id
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Payment if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_reference(
        self, reference_type: PaymentReferenceType, reference_id: str
    ) -> List[Payment]:
        """Payments settling one reservation or subscription, newest first"""
        pass

    @abstractmethod
    async def list_stale_pending(self, created_before: datetime) -> List[Payment]:
        """
        Pending payments the gateway never acknowledged

        Matches status = pending AND transaction_ref IS NULL AND
        created_at < created_before.
        """
        pass

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        pass
