"""GenerateAgencyStatistics Use Case

Recomputes an agency's statistics from the vehicle and reservation tables
and stores the rollup.
"""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.agency_statistics_repository import AgencyStatisticsRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.agency_statistics import AgencyStatistics
from src.domain.reservation import ReservationStatus
from src.domain.user import UserRole
from src.domain.vehicle import VehicleStatus
from .dtos import AgencyStatisticsResponseDTO

logger = logging.getLogger(__name__)

REVENUE_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED)


def percentage(part: int, whole: int) -> Decimal:
    if whole == 0:
        return Decimal("0.00")
    return (Decimal(part) * 100 / Decimal(whole)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_statistics_dto(stats: AgencyStatistics) -> AgencyStatisticsResponseDTO:
    return AgencyStatisticsResponseDTO(
        agency_id=stats.agency_id,
        total_vehicles=stats.total_vehicles,
        available_vehicles=stats.available_vehicles,
        reserved_vehicles=stats.reserved_vehicles,
        maintenance_vehicles=stats.maintenance_vehicles,
        total_reservations=stats.total_reservations,
        confirmed_reservations=stats.confirmed_reservations,
        completed_reservations=stats.completed_reservations,
        cancelled_reservations=stats.cancelled_reservations,
        total_revenue=stats.total_revenue,
        occupancy_rate=stats.occupancy_rate,
        cancellation_rate=stats.cancellation_rate,
        last_updated=stats.last_updated,
    )


class GenerateAgencyStatistics:
    """
    Use Case: Regenerate an agency's statistics

    Business Rules:
    1. Agency must exist
    2. Revenue sums total_price of confirmed and completed reservations
    3. occupancy_rate = reserved / total vehicles * 100
    4. cancellation_rate = cancelled / total reservations * 100
    5. Zero denominators yield 0
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
        statistics_repo: AgencyStatisticsRepository,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.vehicle_repo = vehicle_repo
        self.reservation_repo = reservation_repo
        self.statistics_repo = statistics_repo

    async def execute(self, agency_id: int) -> Result[AgencyStatisticsResponseDTO]:
        try:
            agency = await self.user_repo.get_by_id(agency_id)
            if not agency or agency.role != UserRole.AGENCY:
                return Return.err(
                    Error(code="AGENCY_NOT_FOUND", message=f"Agency {agency_id} not found")
                )

            vehicle_counts = await self.vehicle_repo.count_by_status_for_agency(agency_id)
            reservation_counts = await self.reservation_repo.count_by_status_for_agency(agency_id)
            revenue = await self.reservation_repo.sum_total_price_for_agency(
                agency_id, REVENUE_STATUSES
            )

            total_vehicles = sum(vehicle_counts.values())
            reserved_vehicles = vehicle_counts.get(VehicleStatus.RESERVED, 0)
            total_reservations = sum(reservation_counts.values())
            cancelled_reservations = reservation_counts.get(ReservationStatus.CANCELLED, 0)

            stats = AgencyStatistics(
                agency_id=agency_id,
                total_vehicles=total_vehicles,
                available_vehicles=vehicle_counts.get(VehicleStatus.AVAILABLE, 0),
                reserved_vehicles=reserved_vehicles,
                maintenance_vehicles=vehicle_counts.get(VehicleStatus.MAINTENANCE, 0),
                total_reservations=total_reservations,
                confirmed_reservations=reservation_counts.get(ReservationStatus.CONFIRMED, 0),
                completed_reservations=reservation_counts.get(ReservationStatus.COMPLETED, 0),
                cancelled_reservations=cancelled_reservations,
                total_revenue=Decimal(revenue).quantize(Decimal("0.01")),
                occupancy_rate=percentage(reserved_vehicles, total_vehicles),
                cancellation_rate=percentage(cancelled_reservations, total_reservations),
                last_updated=datetime.utcnow(),
            )

            saved = await self.statistics_repo.save(stats)
            await self.uow.commit()
            logger.info(
                f"Statistics for agency {agency_id}: {total_vehicles} vehicles, "
                f"{total_reservations} reservations, revenue {saved.total_revenue}"
            )

            return Return.ok(to_statistics_dto(saved))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="GENERATE_STATISTICS_FAILED",
                    message="Failed to generate agency statistics",
                    reason=str(e),
                )
            )
