"""Vehicle Repository Interface

Defines the contract for vehicle persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
from src.domain.vehicle import Vehicle, VehicleStatus


class VehicleRepository(ABC):
    """
    Repository interface for Vehicle persistence

    get_by_id(for_update=True) is the per-vehicle serialization point used
    while checking and inserting reservations.
    """

    @abstractmethod
    async def get_by_id(self, vehicle_id: int, for_update: bool = False) -> Optional[Vehicle]:
        """
        Retrieve vehicle by ID

        Args:
            vehicle_id: Vehicle ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Vehicle if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_plate_number(self, plate_number: str) -> Optional[Vehicle]:
        pass

    @abstractmethod
    async def create(self, vehicle: Vehicle) -> Vehicle:
        pass

    @abstractmethod
    async def update(self, vehicle: Vehicle) -> Vehicle:
        pass

    @abstractmethod
    async def delete(self, vehicle: Vehicle) -> None:
        pass

    @abstractmethod
    async def list_all(
        self, agency_id: Optional[int] = None, status: Optional[VehicleStatus] = None
    ) -> List[Vehicle]:
        """
        List vehicles ordered by ID

        Args:
            agency_id: Only this agency's fleet when given
            status: Only vehicles in this status when given
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def list_rentable(self, exclude_ids: Iterable[int] = ()) -> List[Vehicle]:
        """
        List vehicles that are not in maintenance

        Args:
            exclude_ids: Vehicle IDs to leave out of the result

        Returns:
            Vehicles ordered by ID
        """
        pass

    @abstractmethod
    async def count_by_status_for_agency(self, agency_id: int) -> Dict[VehicleStatus, int]:
        pass
