"""CancelReservation Use Case

Cancels a pending or confirmed reservation and refunds what was paid.
"""

import logging
from typing import List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.payment_refunder import PaymentRefunder
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.contract import ContractStatus
from src.domain.payment import Payment, PaymentStatus
from src.domain.reservation import Reservation, ReservationStatus
from .dtos import ReservationResponseDTO
from .mappers import to_reservation_dto

logger = logging.getLogger(__name__)


class CancelReservation:
    """
    Use Case: Cancel a reservation

    Business Rules:
    1. Cancelling twice returns ALREADY_CANCELLED
    2. Completed reservations cannot be cancelled
    3. A completed payment is refunded best-effort once the cancellation is
       committed; a failed refund is reported as a warning and operators
       are alerted
    4. An active contract is terminated
    5. The vehicle status projection is refreshed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reservation_repo: ReservationRepository,
        payment_repo: PaymentRepository,
        vehicle_repo: VehicleRepository,
        contract_repo: ContractRepository,
        payment_gateway: PaymentGateway,
        inventory_ledger: InventoryLedger,
        notification_service: Optional[NotificationService] = None,
    ):
        self.uow = uow
        self.reservation_repo = reservation_repo
        self.payment_repo = payment_repo
        self.vehicle_repo = vehicle_repo
        self.contract_repo = contract_repo
        self.payment_gateway = payment_gateway
        self.inventory_ledger = inventory_ledger
        self.refunder = PaymentRefunder(payment_repo, payment_gateway, notification_service)

    async def execute(self, reservation_id: int) -> Result[ReservationResponseDTO]:
        try:
            reservation = await self.reservation_repo.get_by_id(reservation_id, for_update=True)
            if not reservation:
                return Return.err(
                    Error(
                        code="RESERVATION_NOT_FOUND",
                        message=f"Reservation {reservation_id} not found",
                    )
                )

            if reservation.status == ReservationStatus.CANCELLED:
                return Return.err(
                    Error(
                        code="ALREADY_CANCELLED",
                        message=f"Reservation {reservation_id} is already cancelled",
                    )
                )

            if reservation.status == ReservationStatus.COMPLETED:
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message=f"Reservation {reservation_id} is completed and cannot be cancelled",
                    )
                )

            payment = None
            if reservation.payment_id is not None:
                payment = await self.payment_repo.get_by_id(reservation.payment_id, for_update=True)

            contract = await self.contract_repo.get_by_reservation_id(reservation.id)
            if contract and contract.status == ContractStatus.ACTIVE:
                contract.status = ContractStatus.TERMINATED
                await self.contract_repo.update(contract)

            reservation.status = ReservationStatus.CANCELLED
            await self.reservation_repo.update(reservation)

            vehicle = await self.vehicle_repo.get_by_id(reservation.vehicle_id)
            if vehicle:
                await self.inventory_ledger.refresh_status(vehicle)

            await self.uow.commit()
            logger.info(f"Reservation {reservation.id} cancelled")

            # Refund after commit: no row lock is held across the gateway call
            warnings: List[str] = []
            if payment and payment.status == PaymentStatus.COMPLETED:
                warning = await self._refund(payment, reservation)
                if warning:
                    warnings.append(warning)

            return Return.ok(to_reservation_dto(reservation, payment, warnings))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CANCEL_RESERVATION_FAILED",
                    message="Failed to cancel reservation",
                    reason=str(e),
                )
            )

    async def _refund(self, payment: Payment, reservation: Reservation) -> Optional[str]:
        """Refund the payment; returns a warning message when it could not be done"""
        refund, reason = await self.refunder.issue(payment, f"reservation {reservation.id}")
        if refund is None:
            return f"Refund failed: {reason}. The reservation was cancelled; the refund will be handled manually."

        current = await self.payment_repo.get_by_id(payment.id, for_update=True)
        if current is not None and current.status == PaymentStatus.COMPLETED:
            self.refunder.record(current, refund)
            await self.payment_repo.update(current)
        await self.uow.commit()
        logger.info(f"Refunded payment {payment.id} ({refund.refund_ref})")
        return None
