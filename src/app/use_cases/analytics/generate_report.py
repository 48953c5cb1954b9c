"""GenerateAnalyticsReport / GetAnalyticsReport Use Cases"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.analytics_report_repository import AnalyticsReportRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.analytics_report import AnalyticsReport, ReportType
from src.domain.user import UserRole
from .dtos import AnalyticsReportResponseDTO, GenerateReportCommandDTO
from .figures import ReportFigures, to_json_safe

logger = logging.getLogger(__name__)


def to_report_dto(report: AnalyticsReport) -> AnalyticsReportResponseDTO:
    return AnalyticsReportResponseDTO(
        id=report.id,
        report_ref=report.report_ref,
        report_type=report.report_type.value,
        start_date=report.start_date,
        end_date=report.end_date,
        agency_id=report.agency_id,
        data=report.data,
        created_at=report.created_at,
    )


class GenerateAnalyticsReport:
    """
    Use Case: Compute and store a revenue, usage or performance report

    Business Rules:
    1. The agency, when given, must exist
    2. Figures are computed once and stored with the report
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
        review_repo: ReviewRepository,
        report_repo: AnalyticsReportRepository,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.report_repo = report_repo
        self.figures = ReportFigures(vehicle_repo, reservation_repo, review_repo)

    async def execute(self, command: GenerateReportCommandDTO) -> Result[AnalyticsReportResponseDTO]:
        if command.end_date <= command.start_date:
            return Return.err(
                Error(code="INVALID_INPUT", message="end_date must be after start_date")
            )

        try:
            if command.agency_id is not None:
                agency = await self.user_repo.get_by_id(command.agency_id)
                if not agency or agency.role != UserRole.AGENCY:
                    return Return.err(
                        Error(code="AGENCY_NOT_FOUND", message=f"Agency {command.agency_id} not found")
                    )

            report_type = ReportType(command.report_type)
            data = await self.figures.compute(
                report_type, command.start_date, command.end_date, command.agency_id
            )

            report = await self.report_repo.create(
                AnalyticsReport(
                    report_type=report_type,
                    start_date=command.start_date,
                    end_date=command.end_date,
                    agency_id=command.agency_id,
                    data=to_json_safe(data),
                )
            )
            await self.uow.commit()
            logger.info(f"Generated {report_type.value} report {report.report_ref}")

            return Return.ok(to_report_dto(report))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="GENERATE_REPORT_FAILED",
                    message="Failed to generate report",
                    reason=str(e),
                )
            )


class GetAnalyticsReport:

    def __init__(self, report_repo: AnalyticsReportRepository):
        self.report_repo = report_repo

    async def execute(self, report_id: int) -> Result[AnalyticsReportResponseDTO]:
        try:
            report = await self.report_repo.get_by_id(report_id)
            if not report:
                return Return.err(
                    Error(code="REPORT_NOT_FOUND", message=f"Report {report_id} not found")
                )
            return Return.ok(to_report_dto(report))

        except Exception as e:
            return Return.err(
                Error(code="GET_REPORT_FAILED", message="Failed to retrieve report", reason=str(e))
            )
