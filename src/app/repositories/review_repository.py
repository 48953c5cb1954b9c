"""Review Repository Interface"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.review import Review


class ReviewRepository(ABC):
    """
    Repository interface for Review persistence

    Rating aggregates only consider approved reviews.
    """

    @abstractmethod
    async def get_by_id(self, review_id: int) -> Optional[Review]:
        pass

    @abstractmethod
    async def get_by_reservation_id(self, reservation_id: int) -> Optional[Review]:
        pass

    @abstractmethod
    async def create(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def update(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def delete(self, review: Review) -> None:
        pass

    @abstractmethod
    async def list_approved_for_vehicle(
        self, vehicle_id: int, offset: int, limit: int
    ) -> Tuple[List[Review], int]:
        """
        Page through a vehicle's approved reviews, newest first

        Returns:
            (reviews on the page, total approved reviews of the vehicle)
        """
        pass

    @abstractmethod
    async def rating_summary(self, vehicle_id: int) -> Tuple[Optional[Decimal], int]:
        """Average rating and count of a vehicle's approved reviews (average is None without any)"""
        pass

    @abstractmethod
    async def average_rating(self, agency_id: Optional[int] = None) -> Optional[Decimal]:
        """Average approved rating across the platform, or across one agency's vehicles"""
        pass
