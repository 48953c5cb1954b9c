"""Reservation Repository Interface

Defines the contract for reservation persistence operations. The reservation
table is the ground truth for vehicle availability.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set
from src.domain.reservation import Reservation, ReservationStatus


class ReservationRepository(ABC):
    """Repository interface for Reservation persistence"""

    @abstractmethod
    async def get_by_id(self, reservation_id: int, for_update: bool = False) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def create(self, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def update(self, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def delete(self, reservation: Reservation) -> None:
        pass

    @abstractmethod
    async def has_overlap(
        self,
        vehicle_id: int,
        start_date: datetime,
        end_date: datetime,
        statuses: Iterable[ReservationStatus],
    ) -> bool:
        """
        Check whether any reservation of the vehicle overlaps an interval

        Overlap is half-open: existing.start < end AND existing.end > start.

        Args:
            vehicle_id: Vehicle ID
            start_date: Interval start (inclusive)
            end_date: Interval end (exclusive)
            statuses: Only reservations in these statuses are considered

        Returns:
            True if at least one reservation overlaps
        """
        pass

    @abstractmethod
    async def get_overlapping_vehicle_ids(
        self,
        start_date: datetime,
        end_date: datetime,
        statuses: Iterable[ReservationStatus],
    ) -> Set[int]:
        """
        Collect IDs of vehicles with any reservation overlapping an interval

        Returns:
            Set of vehicle IDs
        """
        pass

    @abstractmethod
    async def count_by_status_for_agency(self, agency_id: int) -> Dict[ReservationStatus, int]:
        pass

    @abstractmethod
    async def sum_total_price_for_agency(
        self, agency_id: int, statuses: Iterable[ReservationStatus]
    ) -> Decimal:
        pass

    @abstractmethod
    async def count_for_vehicle(self, vehicle_id: int) -> int:
        pass

    @abstractmethod
    async def count_all(self) -> int:
        pass

    @abstractmethod
    async def sum_total_price(self, statuses: Iterable[ReservationStatus]) -> Decimal:
        """Platform-wide sum of total_price over reservations in the given statuses"""
        pass

    @abstractmethod
    async def list_starting_between(
        self, start_date: datetime, end_date: datetime, agency_id: Optional[int] = None
    ) -> List[Reservation]:
        """
        List reservations whose start_date falls in [start_date, end_date)

        Args:
            start_date: Window start (inclusive)
            end_date: Window end (exclusive)
            agency_id: Only reservations of this agency's vehicles when given

        Returns:
            Reservations ordered by start_date
        """
        pass
