"""GetAgencyStatistics Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.agency_statistics_repository import AgencyStatisticsRepository
from .dtos import AgencyStatisticsResponseDTO
from .generate_agency_statistics import to_statistics_dto


class GetAgencyStatistics:
    """Returns the last generated rollup without recomputing it"""

    def __init__(self, statistics_repo: AgencyStatisticsRepository):
        self.statistics_repo = statistics_repo

    async def execute(self, agency_id: int) -> Result[AgencyStatisticsResponseDTO]:
        try:
            stats = await self.statistics_repo.get_by_agency_id(agency_id)
            if not stats:
                return Return.err(
                    Error(
                        code="STATISTICS_NOT_FOUND",
                        message=f"No statistics generated for agency {agency_id}",
                    )
                )
            return Return.ok(to_statistics_dto(stats))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_STATISTICS_FAILED",
                    message="Failed to retrieve agency statistics",
                    reason=str(e),
                )
            )
