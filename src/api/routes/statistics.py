"""Statistics API Routes"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.statistics import (
    GenerateAgencyStatistics,
    GetAgencyStatistics,
    GetAgencyPerformance,
    GeneratePlatformStatistics,
    CalculatePlatformGrowth,
    AgencyStatisticsResponseDTO,
    AgencyPerformanceResponseDTO,
    PlatformStatisticsResponseDTO,
    PlatformGrowthResponseDTO,
)
from src.adapter.repositories.agency_statistics_repository import SqlAlchemyAgencyStatisticsRepository
from src.adapter.repositories.platform_statistics_repository import SqlAlchemyPlatformStatisticsRepository
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.review_repository import SqlAlchemyReviewRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.common import to_naive_utc
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/statistics", tags=["Statistics"])


@router.post("/agencies/{agency_id}", response_model=AgencyStatisticsResponseDTO)
async def generate_agency_statistics(agency_id: int, session: AsyncSession = Depends(get_session)):
    """
    Recompute and store an agency's fleet and booking statistics.

    Revenue counts confirmed and completed reservations. Occupancy and
    cancellation rates are percentages with two decimals.

    **Returns:**
    - 200: Fresh statistics
    - 404: Agency not found
    """
    use_case = GenerateAgencyStatistics(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        vehicle_repo=SqlAlchemyVehicleRepository(session),
        reservation_repo=SqlAlchemyReservationRepository(session),
        statistics_repo=SqlAlchemyAgencyStatisticsRepository(session),
    )
    result = await use_case.execute(agency_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/agencies/{agency_id}", response_model=AgencyStatisticsResponseDTO)
async def get_agency_statistics(agency_id: int, session: AsyncSession = Depends(get_session)):
    """
    Return the last generated statistics of an agency.

    **Returns:**
    - 200: Cached statistics
    - 404: Nothing generated yet
    """
    result = await GetAgencyStatistics(SqlAlchemyAgencyStatisticsRepository(session)).execute(agency_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/agencies/{agency_id}/performance", response_model=AgencyPerformanceResponseDTO)
async def get_agency_performance(
    agency_id: int,
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    session: AsyncSession = Depends(get_session)
):
    """
    Occupancy and cancellation rates from the agency's last generated statistics.

    **Returns:**
    - 200: Performance rates, with the requested period echoed back
    - 404: Nothing generated yet
    """
    use_case = GetAgencyPerformance(SqlAlchemyAgencyStatisticsRepository(session))
    result = await use_case.execute(agency_id, to_naive_utc(start_date), to_naive_utc(end_date))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/platform", response_model=PlatformStatisticsResponseDTO)
async def generate_platform_statistics(session: AsyncSession = Depends(get_session)):
    """
    Snapshot marketplace-wide counters for today, replacing today's snapshot.

    **Returns:**
    - 200: Today's snapshot
    """
    use_case = GeneratePlatformStatistics(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        vehicle_repo=SqlAlchemyVehicleRepository(session),
        reservation_repo=SqlAlchemyReservationRepository(session),
        review_repo=SqlAlchemyReviewRepository(session),
        platform_statistics_repo=SqlAlchemyPlatformStatisticsRepository(session),
    )
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/platform/growth", response_model=PlatformGrowthResponseDTO)
async def calculate_platform_growth(session: AsyncSession = Depends(get_session)):
    """
    Percent growth between the latest snapshot and the previous one from
    the month before it.

    **Returns:**
    - 200: Growth figures, or a message when there is no earlier snapshot
    - 404: No snapshot generated yet
    """
    use_case = CalculatePlatformGrowth(SqlAlchemyPlatformStatisticsRepository(session))
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
