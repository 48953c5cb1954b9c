"""CompareAgencyPerformance Use Case"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.user import UserRole
from .dtos import PerformanceComparisonResponseDTO, PerformanceFiguresDTO
from .figures import ReportFigures, ratio

COMPARED_FIELDS = ("total_reservations", "average_rating", "cancellation_rate", "revenue_per_vehicle")


class CompareAgencyPerformance:
    """
    Use Case: Compare one agency with the platform average over a window

    The platform's reservation count is divided by the number of agencies;
    its rating, cancellation rate and revenue per vehicle are already averages.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
        review_repo: ReviewRepository,
    ):
        self.user_repo = user_repo
        self.figures = ReportFigures(vehicle_repo, reservation_repo, review_repo)

    async def execute(
        self, agency_id: int, start_date: datetime, end_date: datetime
    ) -> Result[PerformanceComparisonResponseDTO]:
        if end_date <= start_date:
            return Return.err(
                Error(code="INVALID_INPUT", message="end_date must be after start_date")
            )

        try:
            agency = await self.user_repo.get_by_id(agency_id)
            if not agency or agency.role != UserRole.AGENCY:
                return Return.err(
                    Error(code="AGENCY_NOT_FOUND", message=f"Agency {agency_id} not found")
                )

            own = await self.figures.performance(start_date, end_date, agency_id)
            platform = await self.figures.performance(start_date, end_date)
            agencies = await self.user_repo.count_by_role(UserRole.AGENCY)

            agency_figures = PerformanceFiguresDTO(
                **{field: own[field] for field in COMPARED_FIELDS}
            )
            platform_figures = PerformanceFiguresDTO(
                **{field: platform[field] for field in COMPARED_FIELDS},
            ).model_copy(
                update={"total_reservations": ratio(platform["total_reservations"], agencies)}
            )
            difference = PerformanceFiguresDTO(
                **{
                    field: getattr(agency_figures, field) - getattr(platform_figures, field)
                    for field in COMPARED_FIELDS
                }
            )

            return Return.ok(
                PerformanceComparisonResponseDTO(
                    agency_id=agency_id,
                    start_date=start_date,
                    end_date=end_date,
                    agency=agency_figures,
                    platform=platform_figures,
                    difference=difference,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="COMPARE_PERFORMANCE_FAILED",
                    message="Failed to compare performance",
                    reason=str(e),
                )
            )
