"""GenerateContract Use Case

Creates the rental agreement for a confirmed reservation.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.contract import Contract, ContractStatus
from src.domain.reservation import ReservationStatus
from .dtos import ContractResponseDTO, GenerateContractCommandDTO
from .mappers import to_contract_dto

logger = logging.getLogger(__name__)


def default_terms(brand: str, model: str, start_date, end_date) -> str:
    return (
        f"Rental of {brand} {model} from "
        f"{start_date.isoformat(sep=' ', timespec='minutes')} to "
        f"{end_date.isoformat(sep=' ', timespec='minutes')}"
    )


class GenerateContract:
    """
    Use Case: Generate a rental contract

    Business Rules:
    1. Reservation must exist and be confirmed
    2. At most one contract per reservation
    3. Contract copies the reservation's parties and interval
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reservation_repo: ReservationRepository,
        vehicle_repo: VehicleRepository,
        contract_repo: ContractRepository,
    ):
        self.uow = uow
        self.reservation_repo = reservation_repo
        self.vehicle_repo = vehicle_repo
        self.contract_repo = contract_repo

    async def execute(
        self, reservation_id: int, command: Optional[GenerateContractCommandDTO] = None
    ) -> Result[ContractResponseDTO]:
        try:
            reservation = await self.reservation_repo.get_by_id(reservation_id)
            if not reservation:
                return Return.err(
                    Error(
                        code="RESERVATION_NOT_FOUND",
                        message=f"Reservation {reservation_id} not found",
                    )
                )

            if reservation.status != ReservationStatus.CONFIRMED:
                return Return.err(
                    Error(
                        code="INVALID_STATE",
                        message=f"Contracts can only be generated for confirmed reservations. "
                                f"Current status: {reservation.status.value}",
                    )
                )

            existing = await self.contract_repo.get_by_reservation_id(reservation.id)
            if existing:
                return Return.err(
                    Error(
                        code="CONTRACT_ALREADY_EXISTS",
                        message=f"Reservation {reservation.id} already has contract {existing.id}",
                    )
                )

            terms = command.terms if command and command.terms else None
            if terms is None:
                vehicle = await self.vehicle_repo.get_by_id(reservation.vehicle_id)
                terms = default_terms(
                    vehicle.brand, vehicle.model, reservation.start_date, reservation.end_date
                )

            contract = await self.contract_repo.create(
                Contract(
                    reservation_id=reservation.id,
                    customer_id=reservation.customer_id,
                    vehicle_id=reservation.vehicle_id,
                    start_date=reservation.start_date,
                    end_date=reservation.end_date,
                    status=ContractStatus.ACTIVE,
                    terms=terms,
                )
            )
            await self.uow.commit()
            logger.info(f"Contract {contract.id} generated for reservation {reservation.id}")

            return Return.ok(to_contract_dto(contract))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="GENERATE_CONTRACT_FAILED",
                    message="Failed to generate contract",
                    reason=str(e),
                )
            )
