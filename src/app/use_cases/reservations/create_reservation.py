"""CreateReservation Use Case

Books a vehicle and charges the customer for it.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import (
    ChargeResult,
    GatewayError,
    PaymentDeclined,
    PaymentGateway,
)
from src.app.services.payment_refunder import PaymentRefunder
from src.app.services.vehicle_locks import VehicleLocks
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.base import generate_uuid
from src.domain.payment import Payment, PaymentReferenceType, PaymentStatus
from src.domain.reservation import (
    BLOCKING_STATUSES,
    Reservation,
    ReservationStatus,
    calculate_total_price,
)
from src.domain.user import UserRole
from src.domain.vehicle import VehicleStatus
from .dtos import CreateReservationCommandDTO, ReservationResponseDTO
from .mappers import to_reservation_dto

logger = logging.getLogger(__name__)


class CreateReservation:
    """
    Use Case: Book a vehicle

    Business Rules:
    1. end_date must be after start_date (no rows written otherwise)
    2. Vehicles in maintenance cannot be booked
    3. No two pending/confirmed reservations of a vehicle overlap
    4. total_price = price_per_day * ceil(days)
    5. A failed charge leaves no reservation row and does not touch the
       vehicle status
    6. Only a reservation that is still pending when the charge returns is
       confirmed; a capture for a reservation cancelled meanwhile is refunded

    Flow:
    1. Validate interval, customer and vehicle
    2. Under the per-vehicle lock and the vehicle row lock: check overlap,
       insert pending payment and pending reservation, commit
    3. Charge the gateway (outside the lock) with the payment's idempotency key
    4. Re-read reservation and payment under row locks, then
       Success: complete payment, confirm reservation, refresh vehicle status
       Processing: leave both pending for the webhook to settle
       Failure: fail the payment, delete the reservation
    5. If step 3 or 4 ends without an outcome (unexpected error, cancelled
       request) the pending rows are released before returning
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
        payment_repo: PaymentRepository,
        payment_gateway: PaymentGateway,
        inventory_ledger: InventoryLedger,
        vehicle_locks: VehicleLocks,
        currency: str = "USD",
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.vehicle_repo = vehicle_repo
        self.reservation_repo = reservation_repo
        self.payment_repo = payment_repo
        self.payment_gateway = payment_gateway
        self.inventory_ledger = inventory_ledger
        self.vehicle_locks = vehicle_locks
        self.currency = currency
        self.refunder = PaymentRefunder(payment_repo, payment_gateway, notification_service)

    async def execute(self, command: CreateReservationCommandDTO) -> Result[ReservationResponseDTO]:
        """
        Execute reservation creation

        Args:
            command: CreateReservationCommandDTO

        Returns:
            Result[ReservationResponseDTO]: confirmed (or pending while the
            gateway processes) reservation, or error
        """
        if command.end_date <= command.start_date:
            return Return.err(
                Error(code="INVALID_INPUT", message="end_date must be after start_date")
            )

        try:
            customer = await self.user_repo.get_by_id(command.customer_id)
            if not customer or customer.role != UserRole.CUSTOMER:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Customer {command.customer_id} not found",
                    )
                )

            # Step 1-2: serialized check-then-insert
            async with self.vehicle_locks.hold(command.vehicle_id):
                vehicle = await self.vehicle_repo.get_by_id(command.vehicle_id, for_update=True)
                if not vehicle:
                    return Return.err(
                        Error(
                            code="VEHICLE_NOT_FOUND",
                            message=f"Vehicle {command.vehicle_id} not found",
                        )
                    )

                if vehicle.status == VehicleStatus.MAINTENANCE:
                    return Return.err(
                        Error(
                            code="INVALID_STATE",
                            message=f"Vehicle {vehicle.id} is in maintenance",
                        )
                    )

                overlapping = await self.reservation_repo.has_overlap(
                    vehicle.id, command.start_date, command.end_date, BLOCKING_STATUSES
                )
                if overlapping:
                    return Return.err(
                        Error(
                            code="RESERVATION_CONFLICT",
                            message=f"Vehicle {vehicle.id} is already booked for the requested dates",
                        )
                    )

                total_price = calculate_total_price(
                    vehicle.price_per_day, command.start_date, command.end_date
                )

                payment = await self.payment_repo.create(
                    Payment(
                        amount=total_price,
                        currency=self.currency,
                        reference_type=PaymentReferenceType.RESERVATION,
                        idempotency_key=generate_uuid(),
                        payment_method_ref=command.payment_method_id,
                        customer_ref=customer.payment_customer_ref,
                    )
                )
                reservation = await self.reservation_repo.create(
                    Reservation(
                        customer_id=customer.id,
                        vehicle_id=vehicle.id,
                        start_date=command.start_date,
                        end_date=command.end_date,
                        status=ReservationStatus.PENDING,
                        total_price=total_price,
                        payment_id=payment.id,
                    )
                )
                payment.reference_id = str(reservation.id)
                await self.payment_repo.update(payment)
                await self.uow.commit()

            payment_id, reservation_id = payment.id, reservation.id
            charge: Optional[ChargeResult] = None
            outcome_recorded = False
            try:
                # Step 3: charge
                try:
                    charge = await self.payment_gateway.charge(
                        customer.payment_customer_ref,
                        total_price,
                        self.currency,
                        command.payment_method_id,
                        payment.idempotency_key,
                        description=f"Reservation {reservation_id}: {vehicle.brand} {vehicle.model}",
                        metadata={
                            "payment_id": str(payment_id),
                            "reservation_id": str(reservation_id),
                        },
                    )
                except PaymentDeclined as e:
                    await self._discard(payment, reservation, e.message)
                    outcome_recorded = True
                    return Return.err(
                        Error(code="PAYMENT_DECLINED", message="Payment was declined", reason=e.message)
                    )
                except GatewayError as e:
                    await self._discard(payment, reservation, e.message)
                    outcome_recorded = True
                    return Return.err(
                        Error(
                            code="PAYMENT_FAILED",
                            message="Payment could not be processed",
                            reason=e.message,
                        )
                    )

                # Step 4: settle
                result = await self._settle(charge, payment_id, reservation_id)
                outcome_recorded = True
                return result
            finally:
                if not outcome_recorded:
                    await self._abandon(payment_id, reservation_id, charge)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_RESERVATION_FAILED",
                    message="Failed to create reservation",
                    reason=str(e),
                )
            )

    async def _settle(
        self, charge: ChargeResult, payment_id: int, reservation_id: int
    ) -> Result[ReservationResponseDTO]:
        """Apply the charge outcome to the current rows, not to what was read before the charge"""
        payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
        reservation = await self.reservation_repo.get_by_id(reservation_id, for_update=True)

        if not charge.success:
            if payment.transaction_ref is None:
                payment.transaction_ref = charge.transaction_ref
                await self.payment_repo.update(payment)
            await self.uow.commit()
            logger.info(f"Reservation {reservation_id} awaiting settlement of {charge.transaction_ref}")
            return self._response(reservation, payment)

        if payment.mark_completed(charge.transaction_ref):
            await self.payment_repo.update(payment)

        if reservation is not None and reservation.status == ReservationStatus.PENDING:
            reservation.status = ReservationStatus.CONFIRMED
            await self.reservation_repo.update(reservation)
            vehicle = await self.vehicle_repo.get_by_id(reservation.vehicle_id)
            if vehicle:
                await self.inventory_ledger.refresh_status(vehicle)
            await self.uow.commit()
            logger.info(
                f"Reservation {reservation.id} confirmed for vehicle {reservation.vehicle_id} "
                f"({payment.amount} {payment.currency})"
            )
            return Return.ok(to_reservation_dto(reservation, payment))

        await self.uow.commit()
        if reservation is not None and reservation.status != ReservationStatus.CANCELLED:
            # settled by the webhook while the charge call was returning
            return Return.ok(to_reservation_dto(reservation, payment))

        logger.warning(
            f"Reservation {reservation_id} was cancelled while payment {payment_id} was charged"
        )
        warnings = []
        if payment.status == PaymentStatus.COMPLETED:
            reason = await self.refunder.refund(payment, f"cancelled reservation {reservation_id}")
            await self.uow.commit()
            if reason:
                warnings.append(
                    f"Refund failed: {reason}. The refund will be handled manually."
                )
        return self._response(reservation, payment, warnings)

    @staticmethod
    def _response(
        reservation: Optional[Reservation], payment: Payment, warnings=None
    ) -> Result[ReservationResponseDTO]:
        if reservation is None:
            return Return.err(
                Error(
                    code="CREATE_RESERVATION_FAILED",
                    message=f"Reservation for payment {payment.id} no longer exists",
                )
            )
        return Return.ok(to_reservation_dto(reservation, payment, warnings))

    async def _discard(self, payment: Payment, reservation: Reservation, reason: str) -> None:
        """Fail the payment and drop the pending reservation after a failed charge"""
        logger.warning(f"Charge for reservation {reservation.id} failed: {reason}")
        payment.mark_failed(reason)
        await self.payment_repo.update(payment)
        await self.reservation_repo.delete(reservation)
        await self.uow.commit()

    async def _abandon(
        self, payment_id: int, reservation_id: int, charge: Optional[ChargeResult]
    ) -> None:
        """
        Release the dates held by a booking whose charge never reached a
        recorded outcome

        A capture the gateway already reported is refunded; one still
        processing keeps its transaction_ref so a late success webhook finds
        the failed payment and refunds it.
        """
        try:
            await self.uow.rollback()
            payment = await self.payment_repo.get_by_id(payment_id, for_update=True)
            reservation = await self.reservation_repo.get_by_id(reservation_id, for_update=True)

            if reservation is not None and reservation.status == ReservationStatus.PENDING:
                await self.reservation_repo.delete(reservation)

            captured = False
            if payment is not None and payment.status == PaymentStatus.PENDING:
                if charge is not None and charge.success:
                    captured = payment.mark_completed(charge.transaction_ref)
                else:
                    if charge is not None:
                        payment.transaction_ref = charge.transaction_ref
                    payment.mark_failed("charge interrupted before its outcome was recorded")
                await self.payment_repo.update(payment)
            await self.uow.commit()
            logger.warning(f"Released pending reservation {reservation_id} after an interrupted charge")

            if captured:
                await self.refunder.refund(payment, f"abandoned reservation {reservation_id}")
                await self.uow.commit()
        except Exception as e:
            logger.error(f"Could not release pending reservation {reservation_id}: {e}")
