"""GetAgencyPerformance Use Case"""

from datetime import datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.agency_statistics_repository import AgencyStatisticsRepository
from .dtos import AgencyPerformanceResponseDTO


class GetAgencyPerformance:
    """
    Use Case: Performance rates of an agency

    Reads the cached statistics; callers regenerate them first when they
    need fresh figures. The requested period is echoed back.
    """

    def __init__(self, statistics_repo: AgencyStatisticsRepository):
        self.statistics_repo = statistics_repo

    async def execute(
        self,
        agency_id: int,
        period_start: Optional[datetime] = None,
        period_end: Optional[datetime] = None,
    ) -> Result[AgencyPerformanceResponseDTO]:
        try:
            stats = await self.statistics_repo.get_by_agency_id(agency_id)
            if not stats:
                return Return.err(
                    Error(
                        code="STATISTICS_NOT_FOUND",
                        message=f"No statistics generated for agency {agency_id}",
                    )
                )

            return Return.ok(
                AgencyPerformanceResponseDTO(
                    agency_id=agency_id,
                    occupancy_rate=stats.occupancy_rate,
                    cancellation_rate=stats.cancellation_rate,
                    total_revenue=stats.total_revenue,
                    period_start=period_start,
                    period_end=period_end,
                    statistics_updated=stats.last_updated,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_PERFORMANCE_FAILED",
                    message="Failed to calculate performance metrics",
                    reason=str(e),
                )
            )
