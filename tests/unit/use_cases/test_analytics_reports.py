"""Unit tests for analytics reports and agency comparison

Tests cover:
- Revenue, usage and performance figures over a window
- Figures stored JSON-safe with the report
- Agency against platform average comparison
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.analytics import (
    CompareAgencyPerformance,
    GenerateAnalyticsReport,
    GenerateReportCommandDTO,
    GetAnalyticsReport,
)
from src.app.use_cases.analytics.figures import to_json_safe
from src.domain.reservation import Reservation, ReservationStatus
from src.domain.user import User, UserRole

START = datetime(2030, 7, 1)
END = datetime(2030, 7, 11)


async def assign_id(entity):
    entity.id = 1
    return entity


def reservation(status, days=2, price="100.00", vehicle_id=3):
    return Reservation(
        customer_id=12,
        vehicle_id=vehicle_id,
        start_date=datetime(2030, 7, 2),
        end_date=datetime(2030, 7, 2 + days),
        status=status,
        total_price=Decimal(price),
    )


@pytest.fixture
def agency():
    return User(
        id=7,
        email="fleet@citycars.example",
        role=UserRole.AGENCY,
        name="City Cars",
        profile={"name": "City Cars", "address": "12 Harbour Road"},
    )


@pytest.fixture
def user_repo(agency):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=agency)
    repo.count_by_role = AsyncMock(return_value=2)
    return repo


@pytest.fixture
def reservation_repo():
    repo = MagicMock()
    repo.list_starting_between = AsyncMock(
        return_value=[
            reservation(ReservationStatus.CONFIRMED, days=2, price="100.00"),
            reservation(ReservationStatus.COMPLETED, days=3, price="150.00"),
            reservation(ReservationStatus.CANCELLED, days=1, price="50.00"),
            reservation(ReservationStatus.PENDING, days=1, price="50.00"),
        ]
    )
    return repo


@pytest.fixture
def vehicle_repo():
    repo = MagicMock()
    repo.list_all = AsyncMock(return_value=[MagicMock(id=3), MagicMock(id=4)])
    return repo


@pytest.fixture
def review_repo():
    repo = MagicMock()
    repo.average_rating = AsyncMock(return_value=Decimal("4.5"))
    return repo


@pytest.fixture
def report_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=assign_id)
    return repo


@pytest.fixture
def generate(mock_uow, user_repo, vehicle_repo, reservation_repo, review_repo, report_repo):
    return GenerateAnalyticsReport(
        uow=mock_uow,
        user_repo=user_repo,
        vehicle_repo=vehicle_repo,
        reservation_repo=reservation_repo,
        review_repo=review_repo,
        report_repo=report_repo,
    )


def command(report_type, agency_id=7, start=START, end=END):
    return GenerateReportCommandDTO(
        report_type=report_type, start_date=start, end_date=end, agency_id=agency_id
    )


@pytest.mark.asyncio
class TestGenerateAnalyticsReport:

    async def test_revenue_report(self, generate, reservation_repo, mock_uow):
        """
        Given confirmed, completed, cancelled and pending bookings
        When a revenue report is generated
        Then only confirmed and completed bookings count
        """
        result = await generate.execute(command("revenue"))

        data = result.value.data
        assert data["total_revenue"] == "250.00"
        assert data["paid_reservations"] == 2
        assert data["average_booking_value"] == "125.00"
        assert result.value.report_type == "revenue"
        reservation_repo.list_starting_between.assert_called_once_with(START, END, 7)
        mock_uow.commit.assert_called_once()

    async def test_usage_report(self, generate):
        result = await generate.execute(command("usage"))

        data = result.value.data
        assert data["total_reservations"] == 4
        assert data["reservations_by_status"]["cancelled"] == 1
        assert data["reservations_by_status"]["pending"] == 1
        assert data["vehicle_count"] == 2
        assert data["rented_days"] == 5
        assert data["utilization_rate"] == "25.00"

    async def test_performance_report(self, generate, review_repo):
        result = await generate.execute(command("performance"))

        data = result.value.data
        assert data["cancellation_rate"] == "25.00"
        assert data["average_rating"] == "4.50"
        assert data["revenue_per_vehicle"] == "125.00"
        review_repo.average_rating.assert_called_once_with(7)

    async def test_platform_report_skips_agency_check(self, generate, user_repo):
        result = await generate.execute(command("revenue", agency_id=None))

        assert result.value.agency_id is None
        user_repo.get_by_id.assert_not_called()

    async def test_unknown_agency(self, generate, user_repo, report_repo):
        user_repo.get_by_id = AsyncMock(return_value=None)

        result = await generate.execute(command("revenue"))

        assert result.error.code == "AGENCY_NOT_FOUND"
        report_repo.create.assert_not_called()

    async def test_empty_window(self, generate, reservation_repo):
        result = await generate.execute(command("revenue", end=START))

        assert result.error.code == "INVALID_INPUT"
        reservation_repo.list_starting_between.assert_not_called()

    async def test_get_unknown_report(self, report_repo):
        report_repo.get_by_id = AsyncMock(return_value=None)

        result = await GetAnalyticsReport(report_repo).execute(404)

        assert result.error.code == "REPORT_NOT_FOUND"


@pytest.mark.asyncio
class TestCompareAgencyPerformance:

    async def test_agency_against_platform_average(
        self, user_repo, vehicle_repo, reservation_repo, review_repo
    ):
        """
        Given the agency holds half of 8 platform reservations across 2 agencies
        When performance is compared
        Then reservations are compared with the per-agency platform average
        """
        agency_reservations = reservation_repo.list_starting_between.return_value
        platform_reservations = agency_reservations * 2
        reservation_repo.list_starting_between = AsyncMock(
            side_effect=[agency_reservations, platform_reservations]
        )
        vehicle_repo.list_all = AsyncMock(
            side_effect=[[MagicMock(), MagicMock()], [MagicMock() for _ in range(5)]]
        )
        review_repo.average_rating = AsyncMock(side_effect=[Decimal("4.5"), Decimal("4.0")])
        use_case = CompareAgencyPerformance(user_repo, vehicle_repo, reservation_repo, review_repo)

        result = await use_case.execute(7, START, END)

        data = result.value
        assert data.agency.total_reservations == Decimal("4")
        assert data.platform.total_reservations == Decimal("4.00")
        assert data.difference.total_reservations == Decimal("0")
        assert data.difference.average_rating == Decimal("0.50")
        assert data.platform.revenue_per_vehicle == Decimal("100.00")
        assert data.difference.revenue_per_vehicle == Decimal("25.00")
        assert data.difference.cancellation_rate == Decimal("0")

    async def test_unknown_agency(self, user_repo, vehicle_repo, reservation_repo, review_repo):
        user_repo.get_by_id.return_value.role = UserRole.CUSTOMER
        use_case = CompareAgencyPerformance(user_repo, vehicle_repo, reservation_repo, review_repo)

        result = await use_case.execute(7, START, END)

        assert result.error.code == "AGENCY_NOT_FOUND"


def test_json_safe_keeps_decimal_precision():
    safe = to_json_safe({"total": Decimal("10.50"), "nested": {"rate": Decimal("0.10")}, "count": 3})

    assert safe == {"total": "10.50", "nested": {"rate": "0.10"}, "count": 3}
