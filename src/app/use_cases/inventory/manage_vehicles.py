"""ListVehicles / UpdateVehicle / DeleteVehicle Use Cases

Fleet maintenance outside the reservation flow.
"""

import logging
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.vehicle import VehicleStatus
from .dtos import UpdateVehicleCommandDTO, VehicleListResponseDTO, VehicleResponseDTO
from .register_vehicle import to_vehicle_dto

logger = logging.getLogger(__name__)


class ListVehicles:

    def __init__(self, vehicle_repo: VehicleRepository):
        self.vehicle_repo = vehicle_repo

    async def execute(
        self, agency_id: Optional[int] = None, status: Optional[VehicleStatus] = None
    ) -> Result[VehicleListResponseDTO]:
        try:
            vehicles = await self.vehicle_repo.list_all(agency_id=agency_id, status=status)
            return Return.ok(
                VehicleListResponseDTO(
                    vehicles=[to_vehicle_dto(v) for v in vehicles],
                    total=len(vehicles),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_VEHICLES_FAILED",
                    message="Failed to list vehicles",
                    reason=str(e),
                )
            )


class UpdateVehicle:
    """
    Use Case: Edit a vehicle's listing

    Business Rules:
    1. Omitted fields keep their value
    2. A new plate number must not belong to another vehicle
    3. Price changes apply to future bookings; existing reservations keep
       the total they were charged
    """

    def __init__(self, uow: UnitOfWork, vehicle_repo: VehicleRepository):
        self.uow = uow
        self.vehicle_repo = vehicle_repo

    async def execute(
        self, vehicle_id: int, command: UpdateVehicleCommandDTO
    ) -> Result[VehicleResponseDTO]:
        try:
            vehicle = await self.vehicle_repo.get_by_id(vehicle_id, for_update=True)
            if not vehicle:
                return Return.err(
                    Error(code="VEHICLE_NOT_FOUND", message=f"Vehicle {vehicle_id} not found")
                )

            changes = command.model_dump(exclude_none=True)

            plate_number = changes.get("plate_number")
            if plate_number and plate_number != vehicle.plate_number:
                existing = await self.vehicle_repo.get_by_plate_number(plate_number)
                if existing and existing.id != vehicle.id:
                    return Return.err(
                        Error(
                            code="PLATE_NUMBER_TAKEN",
                            message=f"Plate number {plate_number} is already registered",
                        )
                    )

            for field, value in changes.items():
                setattr(vehicle, field, value)
            vehicle.updated_at = datetime.utcnow()

            updated = await self.vehicle_repo.update(vehicle)
            await self.uow.commit()
            logger.info(f"Vehicle {vehicle_id} updated: {', '.join(sorted(changes)) or 'no changes'}")

            return Return.ok(to_vehicle_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_VEHICLE_FAILED",
                    message="Failed to update vehicle",
                    reason=str(e),
                )
            )


class DeleteVehicle:
    """
    Use Case: Remove a vehicle from the fleet

    A vehicle that has ever been reserved stays: its reservations, contracts
    and reviews reference it. Such vehicles can be put in maintenance
    instead.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
    ):
        self.uow = uow
        self.vehicle_repo = vehicle_repo
        self.reservation_repo = reservation_repo

    async def execute(self, vehicle_id: int) -> Result[None]:
        try:
            vehicle = await self.vehicle_repo.get_by_id(vehicle_id, for_update=True)
            if not vehicle:
                return Return.err(
                    Error(code="VEHICLE_NOT_FOUND", message=f"Vehicle {vehicle_id} not found")
                )

            reservations = await self.reservation_repo.count_for_vehicle(vehicle_id)
            if reservations:
                return Return.err(
                    Error(
                        code="VEHICLE_IN_USE",
                        message=f"Vehicle {vehicle_id} has {reservations} reservation(s) and cannot be deleted",
                    )
                )

            await self.vehicle_repo.delete(vehicle)
            await self.uow.commit()
            logger.info(f"Vehicle {vehicle_id} deleted")

            return Return.ok(None)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_VEHICLE_FAILED",
                    message="Failed to delete vehicle",
                    reason=str(e),
                )
            )
