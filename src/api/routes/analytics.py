"""Analytics API Routes"""

from datetime import datetime
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.analytics import (
    GenerateAnalyticsReport,
    GetAnalyticsReport,
    CompareAgencyPerformance,
    GenerateReportCommandDTO,
    AnalyticsReportResponseDTO,
    PerformanceComparisonResponseDTO,
)
from src.adapter.repositories.analytics_report_repository import SqlAlchemyAnalyticsReportRepository
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.review_repository import SqlAlchemyReviewRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.analytics_request import GenerateReportRequestSchema
from src.api.schemas.common import to_naive_utc
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.post("/reports", response_model=AnalyticsReportResponseDTO, status_code=status.HTTP_201_CREATED)
async def generate_report(
    request: GenerateReportRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate a revenue, usage or performance report over [start_date, end_date).

    - `revenue`: total revenue, paid reservations, average booking value
    - `usage`: reservations by status, rented days, utilization rate
    - `performance`: cancellation rate, average rating, revenue per vehicle

    **Returns:**
    - 201: Report generated and stored
    - 400: end_date is not after start_date
    - 404: Agency not found
    """
    use_case = GenerateAnalyticsReport(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        vehicle_repo=SqlAlchemyVehicleRepository(session),
        reservation_repo=SqlAlchemyReservationRepository(session),
        review_repo=SqlAlchemyReviewRepository(session),
        report_repo=SqlAlchemyAnalyticsReportRepository(session),
    )
    command = GenerateReportCommandDTO(
        report_type=request.report_type.value,
        start_date=to_naive_utc(request.start_date),
        end_date=to_naive_utc(request.end_date),
        agency_id=request.agency_id,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/reports/{report_id}", response_model=AnalyticsReportResponseDTO)
async def get_report(report_id: int, session: AsyncSession = Depends(get_session)):
    """
    Fetch a stored report. Figures are not recomputed.

    **Returns:**
    - 200: Report found
    - 404: Report not found
    """
    result = await GetAnalyticsReport(SqlAlchemyAnalyticsReportRepository(session)).execute(report_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/agencies/{agency_id}/compare", response_model=PerformanceComparisonResponseDTO)
async def compare_agency_performance(
    agency_id: int,
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    session: AsyncSession = Depends(get_session)
):
    """
    Compare an agency's performance with the platform average.

    **Returns:**
    - 200: Agency, platform and difference figures
    - 400: end_date is not after start_date
    - 404: Agency not found
    """
    use_case = CompareAgencyPerformance(
        user_repo=SqlAlchemyUserRepository(session),
        vehicle_repo=SqlAlchemyVehicleRepository(session),
        reservation_repo=SqlAlchemyReservationRepository(session),
        review_repo=SqlAlchemyReviewRepository(session),
    )
    result = await use_case.execute(agency_id, to_naive_utc(start_date), to_naive_utc(end_date))

    if result.is_err():
        raise ClientError(result.error)

    return result.value
