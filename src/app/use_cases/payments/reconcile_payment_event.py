"""ReconcilePaymentEvent Use Case

Applies asynchronous payment outcomes delivered by gateway webhooks.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway, WebhookEvent
from src.app.services.payment_refunder import PaymentRefunder
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.payment import Payment, PaymentReferenceType, PaymentStatus
from src.domain.reservation import ReservationStatus
from src.domain.subscription import SubscriptionStatus
from .dtos import WebhookReconcileResultDTO

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"

HANDLED_EVENTS = (PAYMENT_SUCCEEDED, PAYMENT_FAILED)


class ReconcilePaymentEvent:
    """
    Use Case: Reconcile a webhook event against the local Payment row

    Business Rules:
    1. Payment is located by transaction_ref, falling back to the payment_id
       metadata sent with the charge
    2. Only a pending payment changes status; replays of an event are no-ops
       reported as applied=False
    3. Success confirms a pending reservation (refreshing the vehicle status)
       or activates a subscription; a charge that settles after its
       reservation was cancelled is refunded
    4. Failure cancels a pending reservation or deactivates a subscription
    5. A success for a payment already marked failed (abandoned before the
       gateway answered) is refunded; a subscription waiting on its first
       charge is activated only while still pending
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payment_repo: PaymentRepository,
        reservation_repo: ReservationRepository,
        subscription_repo: SubscriptionRepository,
        vehicle_repo: VehicleRepository,
        inventory_ledger: InventoryLedger,
        payment_gateway: Optional[PaymentGateway] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.payment_repo = payment_repo
        self.reservation_repo = reservation_repo
        self.subscription_repo = subscription_repo
        self.vehicle_repo = vehicle_repo
        self.inventory_ledger = inventory_ledger
        self.payment_gateway = payment_gateway
        self.notification_service = notification_service
        self.refunder = PaymentRefunder(payment_repo, payment_gateway, notification_service)

    async def execute(self, event: WebhookEvent) -> Result[WebhookReconcileResultDTO]:
        """
        Execute webhook reconciliation

        Args:
            event: Verified webhook event

        Returns:
            Result[WebhookReconcileResultDTO]: applied=True when a status changed
        """
        try:
            if event.event_type not in HANDLED_EVENTS:
                logger.debug(f"Ignoring webhook event {event.event_id} ({event.event_type})")
                return Return.ok(self._result(event, None, applied=False))

            payment = await self._find_payment(event)
            if not payment:
                logger.warning(
                    f"Webhook event {event.event_id} references unknown payment "
                    f"(transaction_ref={event.transaction_ref})"
                )
                return Return.ok(self._result(event, None, applied=False))

            if event.event_type == PAYMENT_SUCCEEDED and payment.status == PaymentStatus.FAILED:
                await self._refund_abandoned(event, payment)
                await self.uow.commit()
                return Return.ok(self._result(event, payment, applied=True))

            if event.event_type == PAYMENT_SUCCEEDED:
                applied = payment.mark_completed(event.transaction_ref)
            else:
                applied = payment.mark_failed(f"Gateway reported failure ({event.event_id})")

            if not applied:
                logger.info(
                    f"Webhook event {event.event_id} already applied to payment {payment.id} "
                    f"({payment.status.value})"
                )
                return Return.ok(self._result(event, payment, applied=False))

            await self.payment_repo.update(payment)

            if payment.reference_type == PaymentReferenceType.RESERVATION:
                await self._settle_reservation(payment)
            elif payment.reference_type == PaymentReferenceType.SUBSCRIPTION:
                await self._settle_subscription(payment)

            await self.uow.commit()
            logger.info(
                f"Webhook event {event.event_id} moved payment {payment.id} to {payment.status.value}"
            )

            return Return.ok(self._result(event, payment, applied=True))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RECONCILE_PAYMENT_FAILED",
                    message="Failed to reconcile payment event",
                    reason=str(e),
                )
            )

    async def _find_payment(self, event: WebhookEvent) -> Optional[Payment]:
        if event.transaction_ref:
            payment = await self.payment_repo.get_by_transaction_ref(
                event.transaction_ref, for_update=True
            )
            if payment:
                return payment

        payment_id = event.metadata.get("payment_id")
        if payment_id and payment_id.isdigit():
            return await self.payment_repo.get_by_id(int(payment_id), for_update=True)

        return None

    async def _settle_reservation(self, payment: Payment) -> None:
        reservation = None
        if payment.reference_id and payment.reference_id.isdigit():
            reservation = await self.reservation_repo.get_by_id(
                int(payment.reference_id), for_update=True
            )

        if payment.status == PaymentStatus.COMPLETED:
            if reservation and reservation.status == ReservationStatus.PENDING:
                reservation.status = ReservationStatus.CONFIRMED
            elif reservation is None or reservation.status == ReservationStatus.CANCELLED:
                await self._refund_orphaned(payment)
                return
            else:
                return
        else:
            if reservation and reservation.status == ReservationStatus.PENDING:
                reservation.status = ReservationStatus.CANCELLED
            else:
                return

        await self.reservation_repo.update(reservation)
        vehicle = await self.vehicle_repo.get_by_id(reservation.vehicle_id)
        if vehicle:
            await self.inventory_ledger.refresh_status(vehicle)

    async def _settle_subscription(self, payment: Payment) -> None:
        subscription = None
        if payment.reference_id and payment.reference_id.isdigit():
            subscription = await self.subscription_repo.get_by_id(
                int(payment.reference_id), for_update=True
            )

        if payment.status == PaymentStatus.COMPLETED:
            if subscription and subscription.status == SubscriptionStatus.PENDING:
                subscription.status = SubscriptionStatus.ACTIVE
                subscription.is_active = True
            elif subscription is None or subscription.status == SubscriptionStatus.CANCELLED:
                await self._refund_orphaned(payment)
                return
            else:
                return
        else:
            if subscription is None or subscription.status == SubscriptionStatus.CANCELLED:
                return
            subscription.status = SubscriptionStatus.CANCELLED
            subscription.is_active = False
        await self.subscription_repo.update(subscription)

    async def _refund_orphaned(self, payment: Payment) -> None:
        """Refund a charge that settled after what it paid for was cancelled"""
        target = f"{payment.reference_type.value} {payment.reference_id}"
        logger.warning(f"Payment {payment.id} settled for {target} which is no longer pending; refunding")
        await self.refunder.refund(payment, f"orphaned {target}")

    async def _refund_abandoned(self, event: WebhookEvent, payment: Payment) -> None:
        """Refund a capture reported for a payment this service had already given up on"""
        logger.warning(
            f"Webhook event {event.event_id} reports a capture for failed payment {payment.id}; refunding"
        )
        payment.status = PaymentStatus.COMPLETED
        if event.transaction_ref:
            payment.transaction_ref = event.transaction_ref
        payment.paid_at = datetime.utcnow()
        await self.payment_repo.update(payment)
        await self.refunder.refund(payment, "abandoned charge")

    @staticmethod
    def _result(
        event: WebhookEvent, payment: Optional[Payment], applied: bool
    ) -> WebhookReconcileResultDTO:
        return WebhookReconcileResultDTO(
            event_id=event.event_id,
            event_type=event.event_type,
            payment_id=payment.id if payment else None,
            payment_status=payment.status.value if payment else None,
            applied=applied,
        )
