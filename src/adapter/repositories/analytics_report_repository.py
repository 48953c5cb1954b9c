"""SQLAlchemy implementation of AnalyticsReportRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.analytics_report_repository import AnalyticsReportRepository
from src.domain.analytics_report import AnalyticsReport


class SqlAlchemyAnalyticsReportRepository(AnalyticsReportRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, report_id: int) -> Optional[AnalyticsReport]:
        stmt = select(AnalyticsReport).where(AnalyticsReport.id == report_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, report: AnalyticsReport) -> AnalyticsReport:
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        return report
