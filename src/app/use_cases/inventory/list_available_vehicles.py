"""ListAvailableVehicles Use Case"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.inventory_ledger import InventoryLedger
from .dtos import AvailableVehiclesResponseDTO
from .register_vehicle import to_vehicle_dto


class ListAvailableVehicles:
    """
    Use Case: List vehicles bookable for [start_date, end_date)

    The reservation table is the source of truth; Vehicle.status is only
    consulted to exclude maintenance.
    """

    def __init__(self, inventory_ledger: InventoryLedger):
        self.inventory_ledger = inventory_ledger

    async def execute(
        self, start_date: datetime, end_date: datetime
    ) -> Result[AvailableVehiclesResponseDTO]:
        try:
            if end_date <= start_date:
                return Return.err(
                    Error(code="INVALID_INPUT", message="end_date must be after start_date")
                )

            vehicles = await self.inventory_ledger.list_available(start_date, end_date)
            items = [to_vehicle_dto(v) for v in vehicles]

            return Return.ok(
                AvailableVehiclesResponseDTO(
                    start_date=start_date,
                    end_date=end_date,
                    vehicles=items,
                    total=len(items),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_AVAILABLE_VEHICLES_FAILED",
                    message="Failed to list available vehicles",
                    reason=str(e),
                )
            )
