"""Inventory Ledger

Answers availability questions from the reservation table and keeps the
Vehicle.status projection in step with it.
"""

import logging
from datetime import datetime, time
from typing import List, Optional
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.reservation import BLOCKING_STATUSES, ONE_DAY, ReservationStatus
from src.domain.vehicle import Vehicle, VehicleStatus

logger = logging.getLogger(__name__)


class InventoryLedger:
    """
    Availability service

    Rules:
    - A vehicle is free for [start, end) iff no pending or confirmed
      reservation overlaps it
    - Vehicle.status is derived: maintenance is sticky, otherwise reserved
      iff a confirmed reservation overlaps the current day
    - Only refresh_status, mark_maintenance and clear_maintenance write
      Vehicle.status
    """

    def __init__(self, vehicle_repo: VehicleRepository, reservation_repo: ReservationRepository):
        self.vehicle_repo = vehicle_repo
        self.reservation_repo = reservation_repo

    async def is_available(self, vehicle_id: int, start_date: datetime, end_date: datetime) -> bool:
        has_overlap = await self.reservation_repo.has_overlap(
            vehicle_id, start_date, end_date, BLOCKING_STATUSES
        )
        return not has_overlap

    async def list_available(self, start_date: datetime, end_date: datetime) -> List[Vehicle]:
        booked_ids = await self.reservation_repo.get_overlapping_vehicle_ids(
            start_date, end_date, BLOCKING_STATUSES
        )
        return await self.vehicle_repo.list_rentable(exclude_ids=booked_ids)

    async def derive_status(self, vehicle: Vehicle, as_of: Optional[datetime] = None) -> VehicleStatus:
        if vehicle.status == VehicleStatus.MAINTENANCE:
            return VehicleStatus.MAINTENANCE

        day_start = datetime.combine((as_of or datetime.utcnow()).date(), time.min)
        reserved = await self.reservation_repo.has_overlap(
            vehicle.id, day_start, day_start + ONE_DAY, (ReservationStatus.CONFIRMED,)
        )
        return VehicleStatus.RESERVED if reserved else VehicleStatus.AVAILABLE

    async def refresh_status(self, vehicle: Vehicle, as_of: Optional[datetime] = None) -> bool:
        """
        Recompute the vehicle's status projection

        Args:
            vehicle: Vehicle to refresh
            as_of: Reference time (defaults to now)

        Returns:
            True if the stored status changed
        """
        status = await self.derive_status(vehicle, as_of)
        if status == vehicle.status:
            return False

        logger.info(f"Vehicle {vehicle.id} status {vehicle.status.value} -> {status.value}")
        vehicle.status = status
        vehicle.updated_at = datetime.utcnow()
        await self.vehicle_repo.update(vehicle)
        return True

    async def mark_maintenance(self, vehicle: Vehicle) -> Vehicle:
        vehicle.status = VehicleStatus.MAINTENANCE
        vehicle.updated_at = datetime.utcnow()
        return await self.vehicle_repo.update(vehicle)

    async def clear_maintenance(self, vehicle: Vehicle, as_of: Optional[datetime] = None) -> Vehicle:
        """Lift maintenance, then let the reservation table decide the status"""
        vehicle.status = VehicleStatus.AVAILABLE
        vehicle.status = await self.derive_status(vehicle, as_of)
        vehicle.updated_at = datetime.utcnow()
        return await self.vehicle_repo.update(vehicle)
