"""SyncInventory Use Case

Recomputes the status projection of every vehicle. Run periodically because
"overlaps today" changes as the calendar advances even when no reservation
does.
"""

import logging
import time
from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.repositories.vehicle_repository import VehicleRepository
from .dtos import InventorySyncResultDTO

logger = logging.getLogger(__name__)


class SyncInventory:

    def __init__(
        self,
        uow: UnitOfWork,
        vehicle_repo: VehicleRepository,
        inventory_ledger: InventoryLedger,
    ):
        self.uow = uow
        self.vehicle_repo = vehicle_repo
        self.inventory_ledger = inventory_ledger

    async def execute(self, as_of: Optional[datetime] = None) -> Result[InventorySyncResultDTO]:
        """
        Refresh every vehicle's status projection

        Args:
            as_of: Reference time (defaults to now)

        Returns:
            Result[InventorySyncResultDTO]: counts of checked and changed vehicles
        """
        start_time = time.time()
        sync_time = as_of or datetime.utcnow()

        try:
            vehicles = await self.vehicle_repo.list_all()
            updated = 0

            for vehicle in vehicles:
                if await self.inventory_ledger.refresh_status(vehicle, sync_time):
                    updated += 1

            await self.uow.commit()

            execution_time_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"Inventory sync: {len(vehicles)} vehicles checked, {updated} updated "
                f"in {execution_time_ms}ms"
            )

            return Return.ok(
                InventorySyncResultDTO(
                    total_vehicles_checked=len(vehicles),
                    vehicles_updated=updated,
                    sync_time=sync_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Inventory sync failed: {e}")
            return Return.err(
                Error(
                    code="INVENTORY_SYNC_FAILED",
                    message="Failed to synchronize vehicle statuses",
                    reason=str(e),
                )
            )
