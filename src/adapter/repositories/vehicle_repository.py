"""SQLAlchemy implementation of VehicleRepository

Provides persistence for Vehicle entities with pessimistic locking support
so reservation creation serializes per vehicle.
"""

from typing import Dict, Iterable, List, Optional
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.vehicle import Vehicle, VehicleStatus


class SqlAlchemyVehicleRepository(VehicleRepository):
    """
    SQLAlchemy implementation of VehicleRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Plate number uniqueness backed by a unique constraint
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, vehicle_id: int, for_update: bool = False) -> Optional[Vehicle]:
        """
        Retrieve vehicle by ID with optional row-level locking

        Args:
            vehicle_id: Vehicle ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Vehicle if found, None otherwise
        """
        stmt = select(Vehicle).where(Vehicle.id == vehicle_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_plate_number(self, plate_number: str) -> Optional[Vehicle]:
        stmt = select(Vehicle).where(Vehicle.plate_number == plate_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, vehicle: Vehicle) -> Vehicle:
        self.session.add(vehicle)
        await self.session.flush()
        await self.session.refresh(vehicle)
        return vehicle

    async def update(self, vehicle: Vehicle) -> Vehicle:
        self.session.add(vehicle)
        await self.session.flush()
        return vehicle

    async def delete(self, vehicle: Vehicle) -> None:
        await self.session.delete(vehicle)
        await self.session.flush()

    async def list_all(
        self, agency_id: Optional[int] = None, status: Optional[VehicleStatus] = None
    ) -> List[Vehicle]:
        stmt = select(Vehicle)
        if agency_id is not None:
            stmt = stmt.where(Vehicle.agency_id == agency_id)
        if status is not None:
            stmt = stmt.where(Vehicle.status == status)
        result = await self.session.execute(stmt.order_by(Vehicle.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Vehicle))
        return result.scalar_one()

    async def list_rentable(self, exclude_ids: Iterable[int] = ()) -> List[Vehicle]:
        """
        List vehicles not in maintenance, leaving out the given IDs

        Args:
            exclude_ids: Vehicle IDs already booked for the requested interval

        Returns:
            Vehicles ordered by ID
        """
        stmt = select(Vehicle).where(Vehicle.status != VehicleStatus.MAINTENANCE)

        exclude_ids = list(exclude_ids)
        if exclude_ids:
            stmt = stmt.where(Vehicle.id.not_in(exclude_ids))

        result = await self.session.execute(stmt.order_by(Vehicle.id))
        return list(result.scalars().all())

    async def count_by_status_for_agency(self, agency_id: int) -> Dict[VehicleStatus, int]:
        stmt = (
            select(Vehicle.status, func.count())
            .where(Vehicle.agency_id == agency_id)
            .group_by(Vehicle.status)
        )
        result = await self.session.execute(stmt)
        return {VehicleStatus(status): count for status, count in result.all()}
