"""MarkMaintenance / MarkAvailable Use Cases

Manual toggling of the maintenance flag. Clearing maintenance hands the
status back to the reservation-derived projection.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.repositories.vehicle_repository import VehicleRepository
from .dtos import VehicleResponseDTO
from .register_vehicle import to_vehicle_dto

logger = logging.getLogger(__name__)


class MarkMaintenance:

    def __init__(
        self,
        uow: UnitOfWork,
        vehicle_repo: VehicleRepository,
        inventory_ledger: InventoryLedger,
    ):
        self.uow = uow
        self.vehicle_repo = vehicle_repo
        self.inventory_ledger = inventory_ledger

    async def execute(self, vehicle_id: int) -> Result[VehicleResponseDTO]:
        try:
            vehicle = await self.vehicle_repo.get_by_id(vehicle_id, for_update=True)
            if not vehicle:
                return Return.err(
                    Error(code="VEHICLE_NOT_FOUND", message=f"Vehicle {vehicle_id} not found")
                )

            vehicle = await self.inventory_ledger.mark_maintenance(vehicle)
            await self.uow.commit()
            logger.info(f"Vehicle {vehicle_id} placed in maintenance")

            return Return.ok(to_vehicle_dto(vehicle))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_MAINTENANCE_FAILED",
                    message="Failed to mark vehicle as in maintenance",
                    reason=str(e),
                )
            )


class MarkAvailable:
    """
    Use Case: Return a vehicle from maintenance

    The resulting status is reserved when a confirmed reservation overlaps
    today, available otherwise.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        vehicle_repo: VehicleRepository,
        inventory_ledger: InventoryLedger,
    ):
        self.uow = uow
        self.vehicle_repo = vehicle_repo
        self.inventory_ledger = inventory_ledger

    async def execute(self, vehicle_id: int) -> Result[VehicleResponseDTO]:
        try:
            vehicle = await self.vehicle_repo.get_by_id(vehicle_id, for_update=True)
            if not vehicle:
                return Return.err(
                    Error(code="VEHICLE_NOT_FOUND", message=f"Vehicle {vehicle_id} not found")
                )

            vehicle = await self.inventory_ledger.clear_maintenance(vehicle)
            await self.uow.commit()
            logger.info(f"Vehicle {vehicle_id} returned to service as {vehicle.status.value}")

            return Return.ok(to_vehicle_dto(vehicle))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_AVAILABLE_FAILED",
                    message="Failed to mark vehicle as available",
                    reason=str(e),
                )
            )
