"""ExpireStalePayments Use Case

Releases holds left behind by charges that never got an answer from the
gateway: a pending payment with no transaction reference after the TTL
has passed is failed, and the reservation or subscription it was holding
is cancelled.
"""

import logging
import time
from datetime import datetime, timedelta
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.payment import Payment, PaymentReferenceType, PaymentStatus
from src.domain.reservation import ReservationStatus
from src.domain.subscription import SubscriptionStatus
from .dtos import ExpireStalePaymentsResultDTO

logger = logging.getLogger(__name__)

DEFAULT_TTL_MINUTES = 30


class ExpireStalePayments:
    """
    Use Case: Expire pending payments the gateway never acknowledged

    Business Rules:
    1. Only pending payments without a transaction_ref that are older than
       the TTL are touched; a payment that got a reference is left for the
       webhook to settle
    2. The payment is failed and a pending reservation or subscription it
       paid for is cancelled; confirmed or active ones are left alone
    3. Each payment is committed on its own so one bad row does not hold
       back the rest
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        reservation_repo: ReservationRepository,
        subscription_repo: SubscriptionRepository,
        vehicle_repo: VehicleRepository,
        inventory_ledger: InventoryLedger,
        ttl_minutes: int = DEFAULT_TTL_MINUTES,
    ):
        self.uow = uow
        self.payment_repo = payment_repo
        self.reservation_repo = reservation_repo
        self.subscription_repo = subscription_repo
        self.vehicle_repo = vehicle_repo
        self.inventory_ledger = inventory_ledger
        self.ttl_minutes = ttl_minutes

    async def execute(self, as_of: Optional[datetime] = None) -> Result[ExpireStalePaymentsResultDTO]:
        """
        Expire every stale pending payment

        Args:
            as_of: Reference time (defaults to now)

        Returns:
            Result[ExpireStalePaymentsResultDTO]: counts of expired payments and released holds
        """
        start_time = time.time()
        run_time = as_of or datetime.utcnow()
        cutoff = run_time - timedelta(minutes=self.ttl_minutes)

        try:
            candidates = await self.payment_repo.list_stale_pending(cutoff)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Stale payment expiry failed: {e}")
            return Return.err(
                Error(
                    code="EXPIRE_PAYMENTS_FAILED",
                    message="Failed to list stale payments",
                    reason=str(e),
                )
            )

        expired = 0
        reservations_cancelled = 0
        subscriptions_cancelled = 0
        failed = 0

        for candidate in candidates:
            try:
                payment = await self.payment_repo.get_by_id(candidate.id, for_update=True)
                if not payment or payment.transaction_ref or payment.status != PaymentStatus.PENDING:
                    await self.uow.rollback()
                    continue

                payment.mark_failed(f"No gateway response within {self.ttl_minutes} minutes")
                await self.payment_repo.update(payment)

                if payment.reference_type == PaymentReferenceType.RESERVATION:
                    if await self._cancel_reservation(payment, run_time):
                        reservations_cancelled += 1
                elif payment.reference_type == PaymentReferenceType.SUBSCRIPTION:
                    if await self._cancel_subscription(payment):
                        subscriptions_cancelled += 1

                await self.uow.commit()
                expired += 1
                logger.info(
                    f"Expired stale payment {payment.id} for "
                    f"{payment.reference_type.value} {payment.reference_id}"
                )
            except Exception as e:
                await self.uow.rollback()
                failed += 1
                logger.error(f"Failed to expire payment {candidate.id}: {e}")

        execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Stale payment expiry: {len(candidates)} candidates, {expired} expired, "
            f"{failed} failed in {execution_time_ms}ms"
        )

        return Return.ok(
            ExpireStalePaymentsResultDTO(
                payments_checked=len(candidates),
                payments_expired=expired,
                reservations_cancelled=reservations_cancelled,
                subscriptions_cancelled=subscriptions_cancelled,
                payments_failed=failed,
                cutoff=cutoff,
                execution_time_ms=execution_time_ms,
            )
        )

    async def _cancel_reservation(self, payment: Payment, as_of: datetime) -> bool:
        if not (payment.reference_id and payment.reference_id.isdigit()):
            return False
        reservation = await self.reservation_repo.get_by_id(
            int(payment.reference_id), for_update=True
        )
        if not reservation or reservation.status != ReservationStatus.PENDING:
            return False

        reservation.status = ReservationStatus.CANCELLED
        await self.reservation_repo.update(reservation)
        vehicle = await self.vehicle_repo.get_by_id(reservation.vehicle_id)
        if vehicle:
            await self.inventory_ledger.refresh_status(vehicle, as_of)
        return True

    async def _cancel_subscription(self, payment: Payment) -> bool:
        if not (payment.reference_id and payment.reference_id.isdigit()):
            return False
        subscription = await self.subscription_repo.get_by_id(
            int(payment.reference_id), for_update=True
        )
        if not subscription or subscription.status != SubscriptionStatus.PENDING:
            return False

        subscription.status = SubscriptionStatus.CANCELLED
        subscription.is_active = False
        await self.subscription_repo.update(subscription)
        return True
