"""Analytics Report Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.analytics_report import AnalyticsReport


class AnalyticsReportRepository(ABC):

    @abstractmethod
    async def get_by_id(self, report_id: int) -> Optional[AnalyticsReport]:
        pass

    @abstractmethod
    async def create(self, report: AnalyticsReport) -> AnalyticsReport:
        pass
