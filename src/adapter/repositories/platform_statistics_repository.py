"""SQLAlchemy implementation of PlatformStatisticsRepository"""

from datetime import date, datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.platform_statistics_repository import PlatformStatisticsRepository
from src.domain.platform_statistics import PlatformStatistics


class SqlAlchemyPlatformStatisticsRepository(PlatformStatisticsRepository):
    """
    SQLAlchemy implementation of PlatformStatisticsRepository

    One row per day; save() overwrites that day's row in place.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_latest(self) -> Optional[PlatformStatistics]:
        stmt = select(PlatformStatistics).order_by(PlatformStatistics.period.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_between(self, after: date, before: date) -> Optional[PlatformStatistics]:
        stmt = (
            select(PlatformStatistics)
            .where(PlatformStatistics.period >= after, PlatformStatistics.period < before)
            .order_by(PlatformStatistics.period.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, statistics: PlatformStatistics) -> PlatformStatistics:
        stmt = select(PlatformStatistics).where(PlatformStatistics.period == statistics.period)
        existing = (await self.session.execute(stmt)).scalar_one_or_none()

        if existing is not None and existing is not statistics:
            for field, value in statistics.model_dump(exclude={"id", "created_at"}).items():
                setattr(existing, field, value)
            existing.updated_at = datetime.utcnow()
            statistics = existing

        self.session.add(statistics)
        await self.session.flush()
        await self.session.refresh(statistics)
        return statistics
