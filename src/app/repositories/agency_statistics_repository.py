"""Agency Statistics Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.agency_statistics import AgencyStatistics


class AgencyStatisticsRepository(ABC):

    @abstractmethod
    async def get_by_agency_id(self, agency_id: int) -> Optional[AgencyStatistics]:
        pass

    @abstractmethod
    async def save(self, statistics: AgencyStatistics) -> AgencyStatistics:
        """Insert or update the agency's cached rollup"""
        pass
