"""GetVehicle Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.vehicle_repository import VehicleRepository
from .dtos import VehicleResponseDTO
from .register_vehicle import to_vehicle_dto


class GetVehicle:

    def __init__(self, vehicle_repo: VehicleRepository):
        self.vehicle_repo = vehicle_repo

    async def execute(self, vehicle_id: int) -> Result[VehicleResponseDTO]:
        try:
            vehicle = await self.vehicle_repo.get_by_id(vehicle_id)
            if not vehicle:
                return Return.err(
                    Error(code="VEHICLE_NOT_FOUND", message=f"Vehicle {vehicle_id} not found")
                )
            return Return.ok(to_vehicle_dto(vehicle))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_VEHICLE_FAILED",
                    message="Failed to retrieve vehicle",
                    reason=str(e),
                )
            )
