"""SQLAlchemy implementation of PaymentRepository"""

from datetime import datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.payment import Payment, PaymentReferenceType, PaymentStatus


class SqlAlchemyPaymentRepository(PaymentRepository):
    """
    SQLAlchemy implementation of PaymentRepository

    Features:
    - Row locking on lookups used by webhook reconciliation, so concurrent
      deliveries of one event apply once
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, payment_id: int, for_update: bool = False) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.id == payment_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_transaction_ref(
        self, transaction_ref: str, for_update: bool = False
    ) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.transaction_ref == transaction_ref)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_reference(
        self, reference_type: PaymentReferenceType, reference_id: str
    ) -> List[Payment]:
        stmt = (
            select(Payment)
            .where(
                Payment.reference_type == reference_type,
                Payment.reference_id == reference_id,
            )
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_stale_pending(self, created_before: datetime) -> List[Payment]:
        stmt = (
            select(Payment)
            .where(
                Payment.status == PaymentStatus.PENDING,
                Payment.transaction_ref.is_(None),
                Payment.created_at < created_before,
            )
            .order_by(Payment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, payment: Payment) -> Payment:
        self.session.add(payment)
        await self.session.flush()
        await self.session.refresh(payment)
        return payment

    async def update(self, payment: Payment) -> Payment:
        payment.updated_at = datetime.utcnow()
        self.session.add(payment)
        await self.session.flush()
        return payment
