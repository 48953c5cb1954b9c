"""SQLAlchemy implementation of AgencyStatisticsRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.agency_statistics_repository import AgencyStatisticsRepository
from src.domain.agency_statistics import AgencyStatistics


class SqlAlchemyAgencyStatisticsRepository(AgencyStatisticsRepository):
    """
    SQLAlchemy implementation of AgencyStatisticsRepository

    One row per agency; save() overwrites the existing row in place.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_agency_id(self, agency_id: int) -> Optional[AgencyStatistics]:
        stmt = select(AgencyStatistics).where(AgencyStatistics.agency_id == agency_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, statistics: AgencyStatistics) -> AgencyStatistics:
        existing = await self.get_by_agency_id(statistics.agency_id)

        if existing is not None and existing is not statistics:
            for field, value in statistics.model_dump(exclude={"id"}).items():
                setattr(existing, field, value)
            statistics = existing

        self.session.add(statistics)
        await self.session.flush()
        await self.session.refresh(statistics)
        return statistics
