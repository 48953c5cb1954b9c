"""Report figures computed from reservations, vehicles and reviews

All money and rate values are Decimals with two places; rates are
percentages and 0 when there is nothing to divide by.
"""

from collections import Counter
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.analytics_report import ReportType
from src.domain.reservation import ReservationStatus, rental_days
from src.app.use_cases.statistics.generate_agency_statistics import REVENUE_STATUSES, percentage

TWO_PLACES = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def ratio(numerator, denominator) -> Decimal:
    if not denominator:
        return Decimal("0.00")
    return money(Decimal(numerator) / Decimal(denominator))


class ReportFigures:
    """Computes the figures of each report type over one window"""

    def __init__(
        self,
        vehicle_repo: VehicleRepository,
        reservation_repo: ReservationRepository,
        review_repo: ReviewRepository,
    ):
        self.vehicle_repo = vehicle_repo
        self.reservation_repo = reservation_repo
        self.review_repo = review_repo

    async def compute(
        self,
        report_type: ReportType,
        start_date: datetime,
        end_date: datetime,
        agency_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        if report_type == ReportType.REVENUE:
            return await self.revenue(start_date, end_date, agency_id)
        if report_type == ReportType.USAGE:
            return await self.usage(start_date, end_date, agency_id)
        return await self.performance(start_date, end_date, agency_id)

    async def revenue(self, start_date, end_date, agency_id=None) -> Dict[str, Any]:
        reservations = await self.reservation_repo.list_starting_between(start_date, end_date, agency_id)
        paid = [r for r in reservations if r.status in REVENUE_STATUSES]
        total = sum((r.total_price for r in paid), Decimal("0"))
        return {
            "total_revenue": money(total),
            "paid_reservations": len(paid),
            "average_booking_value": ratio(total, len(paid)),
        }

    async def usage(self, start_date, end_date, agency_id=None) -> Dict[str, Any]:
        reservations = await self.reservation_repo.list_starting_between(start_date, end_date, agency_id)
        vehicles = await self.vehicle_repo.list_all(agency_id=agency_id)

        by_status = Counter(r.status.value for r in reservations)
        rented_days = sum(
            rental_days(r.start_date, r.end_date) for r in reservations if r.status in REVENUE_STATUSES
        )
        available_days = len(vehicles) * rental_days(start_date, end_date)
        return {
            "total_reservations": len(reservations),
            "reservations_by_status": {s.value: by_status.get(s.value, 0) for s in ReservationStatus},
            "vehicle_count": len(vehicles),
            "rented_days": rented_days,
            "utilization_rate": percentage(rented_days, available_days),
        }

    async def performance(self, start_date, end_date, agency_id=None) -> Dict[str, Any]:
        reservations = await self.reservation_repo.list_starting_between(start_date, end_date, agency_id)
        vehicles = await self.vehicle_repo.list_all(agency_id=agency_id)
        rating = await self.review_repo.average_rating(agency_id)

        cancelled = sum(1 for r in reservations if r.status == ReservationStatus.CANCELLED)
        revenue = sum(
            (r.total_price for r in reservations if r.status in REVENUE_STATUSES), Decimal("0")
        )
        return {
            "total_reservations": len(reservations),
            "cancelled_reservations": cancelled,
            "cancellation_rate": percentage(cancelled, len(reservations)),
            "average_rating": money(rating or 0),
            "vehicle_count": len(vehicles),
            "revenue_per_vehicle": ratio(revenue, len(vehicles)),
        }


def to_json_safe(figures: Dict[str, Any]) -> Dict[str, Any]:
    """Decimals become strings so the figures fit a JSON column without losing precision"""
    safe = {}
    for key, value in figures.items():
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, dict):
            value = to_json_safe(value)
        safe[key] = value
    return safe
