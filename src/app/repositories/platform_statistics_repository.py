"""Platform Statistics Repository Interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional
from src.domain.platform_statistics import PlatformStatistics


class PlatformStatisticsRepository(ABC):

    @abstractmethod
    async def get_latest(self) -> Optional[PlatformStatistics]:
        pass

    @abstractmethod
    async def get_latest_between(self, after: date, before: date) -> Optional[PlatformStatistics]:
        """Most recent snapshot with after <= period < before"""
        pass

    @abstractmethod
    async def save(self, statistics: PlatformStatistics) -> PlatformStatistics:
        """Insert the day's snapshot or overwrite it when that day already has one"""
        pass
