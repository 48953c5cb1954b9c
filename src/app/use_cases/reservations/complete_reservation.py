"""CompleteReservation Use Case"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.contract import ContractStatus
from src.domain.reservation import ReservationStatus, can_transition
from .dtos import ReservationResponseDTO
from .mappers import to_reservation_dto

logger = logging.getLogger(__name__)


class CompleteReservation:
    """
    Use Case: Close a rental once the vehicle is returned

    Only confirmed reservations complete. The active contract completes with
    it and the vehicle status is refreshed.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reservation_repo: ReservationRepository,
        vehicle_repo: VehicleRepository,
        contract_repo: ContractRepository,
        inventory_ledger: InventoryLedger,
    ):
        self.uow = uow
        self.reservation_repo = reservation_repo
        self.vehicle_repo = vehicle_repo
        self.contract_repo = contract_repo
        self.inventory_ledger = inventory_ledger

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

            if not can_transition(reservation.status, ReservationStatus.COMPLETED):
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message=f"Only confirmed reservations can be completed. "
                                f"Current status: {reservation.status.value}",
                    )
                )

            reservation.status = ReservationStatus.COMPLETED
            await self.reservation_repo.update(reservation)

            contract = await self.contract_repo.get_by_reservation_id(reservation.id)
            if contract and contract.status == ContractStatus.ACTIVE:
                contract.status = ContractStatus.COMPLETED
                await self.contract_repo.update(contract)

            vehicle = await self.vehicle_repo.get_by_id(reservation.vehicle_id)
            if vehicle:
                await self.inventory_ledger.refresh_status(vehicle)

            await self.uow.commit()
            logger.info(f"Reservation {reservation.id} completed")

            return Return.ok(to_reservation_dto(reservation))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="COMPLETE_RESERVATION_FAILED",
                    message="Failed to complete reservation",
                    reason=str(e),
                )
            )
