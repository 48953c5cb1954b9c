"""GeneratePlatformStatistics / CalculatePlatformGrowth Use Cases

Marketplace-wide daily snapshots and the month-over-month growth derived
from them.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.platform_statistics_repository import PlatformStatisticsRepository
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.platform_statistics import PlatformStatistics
from src.domain.user import UserRole
from .dtos import PlatformGrowthResponseDTO, PlatformStatisticsResponseDTO
from .generate_agency_statistics import REVENUE_STATUSES

logger = logging.getLogger(__name__)

GROWTH_LOOKBACK_DAYS = 30

TWO_PLACES = Decimal("0.01")


def growth(current, previous) -> Optional[Decimal]:
    if not previous:
        return None
    change = (Decimal(current) - Decimal(previous)) * 100 / Decimal(previous)
    return change.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_platform_dto(stats: PlatformStatistics) -> PlatformStatisticsResponseDTO:
    return PlatformStatisticsResponseDTO(
        period=stats.period,
        total_agencies=stats.total_agencies,
        active_agencies=stats.active_agencies,
        total_vehicles=stats.total_vehicles,
        total_reservations=stats.total_reservations,
        total_revenue=stats.total_revenue,
        average_rating=stats.average_rating,
        updated_at=stats.updated_at,
    )


class GeneratePlatformStatistics:
    """
    Use Case: Snapshot the marketplace counters for today

    Business Rules:
    1. One snapshot per day; regenerating the same day overwrites it
    2. Revenue counts confirmed and completed reservations
    3. average_rating only counts approved reviews (0 when there are none)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        user_repo: UserRepository,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
        review_repo: ReviewRepository,
        platform_statistics_repo: PlatformStatisticsRepository,
    ):
        self.uow = uow
        self.user_repo = user_repo
        self.vehicle_repo = vehicle_repo
        self.reservation_repo = reservation_repo
        self.review_repo = review_repo
        self.platform_statistics_repo = platform_statistics_repo

    async def execute(self, as_of: Optional[datetime] = None) -> Result[PlatformStatisticsResponseDTO]:
        try:
            as_of = as_of or datetime.utcnow()

            revenue = await self.reservation_repo.sum_total_price(REVENUE_STATUSES)
            rating = await self.review_repo.average_rating()

            stats = PlatformStatistics(
                period=as_of.date(),
                total_agencies=await self.user_repo.count_by_role(UserRole.AGENCY),
                active_agencies=await self.user_repo.count_by_role(UserRole.AGENCY, active_only=True),
                total_vehicles=await self.vehicle_repo.count(),
                total_reservations=await self.reservation_repo.count_all(),
                total_revenue=Decimal(revenue).quantize(TWO_PLACES),
                average_rating=Decimal(rating or 0).quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
            )

            saved = await self.platform_statistics_repo.save(stats)
            await self.uow.commit()
            logger.info(
                f"Platform statistics for {saved.period}: {saved.total_agencies} agencies, "
                f"{saved.total_vehicles} vehicles, {saved.total_reservations} reservations"
            )

            return Return.ok(to_platform_dto(saved))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="GENERATE_PLATFORM_STATISTICS_FAILED",
                    message="Failed to generate platform statistics",
                    reason=str(e),
                )
            )


class CalculatePlatformGrowth:
    """
    Use Case: Growth between the latest snapshot and the previous one

    The previous snapshot is the most recent one from the 30 days before
    the latest.
    """

    def __init__(self, platform_statistics_repo: PlatformStatisticsRepository):
        self.platform_statistics_repo = platform_statistics_repo

    async def execute(self) -> Result[PlatformGrowthResponseDTO]:
        try:
            latest = await self.platform_statistics_repo.get_latest()
            if not latest:
                return Return.err(
                    Error(
                        code="PLATFORM_STATISTICS_NOT_FOUND",
                        message="No platform statistics generated yet",
                    )
                )

            previous = await self.platform_statistics_repo.get_latest_between(
                latest.period - timedelta(days=GROWTH_LOOKBACK_DAYS), latest.period
            )
            if not previous:
                return Return.ok(
                    PlatformGrowthResponseDTO(
                        current_period=latest.period,
                        message="Not enough historical data for growth calculation",
                    )
                )

            return Return.ok(
                PlatformGrowthResponseDTO(
                    current_period=latest.period,
                    previous_period=previous.period,
                    agency_growth=growth(latest.total_agencies, previous.total_agencies),
                    vehicle_growth=growth(latest.total_vehicles, previous.total_vehicles),
                    reservation_growth=growth(latest.total_reservations, previous.total_reservations),
                    revenue_growth=growth(latest.total_revenue, previous.total_revenue),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="CALCULATE_GROWTH_FAILED",
                    message="Failed to calculate platform growth",
                    reason=str(e),
                )
            )
