"""CheckAvailability Use Case

Answers whether one vehicle can be booked for [start_date, end_date).
"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.inventory_ledger import InventoryLedger
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.vehicle import VehicleStatus
from .dtos import AvailabilityResponseDTO


class CheckAvailability:
    """
    Use Case: Check a vehicle's availability for an interval

    Business Rules:
    1. end_date must be after start_date
    2. Vehicles in maintenance are never available
    3. Otherwise available iff no pending or confirmed reservation overlaps
    """

    def __init__(self, vehicle_repo: VehicleRepository, inventory_ledger: InventoryLedger):
        self.vehicle_repo = vehicle_repo
        self.inventory_ledger = inventory_ledger

    async def execute(
        self, vehicle_id: int, start_date: datetime, end_date: datetime
    ) -> Result[AvailabilityResponseDTO]:
        try:
            if end_date <= start_date:
                return Return.err(
                    Error(code="INVALID_INPUT", message="end_date must be after start_date")
                )

            vehicle = await self.vehicle_repo.get_by_id(vehicle_id)
            if not vehicle:
                return Return.err(
                    Error(code="VEHICLE_NOT_FOUND", message=f"Vehicle {vehicle_id} not found")
                )

            available = vehicle.status != VehicleStatus.MAINTENANCE and (
                await self.inventory_ledger.is_available(vehicle_id, start_date, end_date)
            )

            return Return.ok(
                AvailabilityResponseDTO(
                    vehicle_id=vehicle_id,
                    start_date=start_date,
                    end_date=end_date,
                    available=available,
                    vehicle_status=vehicle.status.value,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="CHECK_AVAILABILITY_FAILED",
                    message="Failed to check availability",
                    reason=str(e),
                )
            )
