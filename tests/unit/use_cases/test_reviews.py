"""Unit tests for review use cases and the vehicle rating aggregate"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.reviews import (
    CreateReview,
    CreateReviewCommandDTO,
    DeleteReview,
    ListVehicleReviews,
    ModerateReview,
    ModerateReviewCommandDTO,
    UpdateReview,
    UpdateReviewCommandDTO,
)
from src.domain.reservation import Reservation, ReservationStatus
from src.domain.review import Review, ReviewStatus
from src.domain.vehicle import Vehicle, VehicleStatus


async def assign_id(entity):
    entity.id = 1
    return entity


async def return_entity(entity):
    return entity


@pytest.fixture
def vehicle():
    return Vehicle(
        id=3,
        agency_id=7,
        brand="Toyota",
        model="Corolla",
        year=2022,
        color="white",
        price_per_day=Decimal("50.00"),
        plate_number="AB-123-CD",
        status=VehicleStatus.AVAILABLE,
    )


@pytest.fixture
def reservation():
    return Reservation(
        id=40,
        customer_id=12,
        vehicle_id=3,
        start_date=datetime(2030, 7, 1, 10),
        end_date=datetime(2030, 7, 4, 10),
        status=ReservationStatus.COMPLETED,
        total_price=Decimal("150.00"),
    )


@pytest.fixture
def review():
    return Review(
        id=5,
        customer_id=12,
        vehicle_id=3,
        reservation_id=40,
        rating=4,
        comment="Fine",
        status=ReviewStatus.APPROVED,
    )


@pytest.fixture
def review_repo(review):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=review)
    repo.get_by_reservation_id = AsyncMock(return_value=None)
    repo.create = AsyncMock(side_effect=assign_id)
    repo.update = AsyncMock(side_effect=return_entity)
    repo.delete = AsyncMock()
    repo.rating_summary = AsyncMock(return_value=(None, 0))
    return repo


@pytest.fixture
def vehicle_repo(vehicle):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=vehicle)
    repo.update = AsyncMock(side_effect=return_entity)
    return repo


@pytest.fixture
def reservation_repo(reservation):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=reservation)
    return repo


def review_command(**overrides):
    data = dict(customer_id=12, vehicle_id=3, reservation_id=40, rating=5, comment="Great")
    data.update(overrides)
    return CreateReviewCommandDTO(**data)


@pytest.mark.asyncio
class TestCreateReview:

    async def test_review_starts_pending(
        self, mock_uow, review_repo, reservation_repo, vehicle_repo
    ):
        use_case = CreateReview(mock_uow, review_repo, reservation_repo, vehicle_repo)

        result = await use_case.execute(review_command())

        assert result.is_ok()
        assert result.value.status == "pending"
        assert result.value.rating == 5
        mock_uow.commit.assert_called_once()

    async def test_pending_review_does_not_move_the_rating(
        self, mock_uow, review_repo, reservation_repo, vehicle_repo, vehicle
    ):
        """
        Given a vehicle with no approved reviews
        When a new (pending) review is submitted
        Then the vehicle rating stays at 0 with no counted reviews
        """
        use_case = CreateReview(mock_uow, review_repo, reservation_repo, vehicle_repo)

        await use_case.execute(review_command())

        assert vehicle.average_rating == Decimal("0.0")
        assert vehicle.total_reviews == 0
        review_repo.rating_summary.assert_called_once_with(3)

    @pytest.mark.parametrize(
        "overrides",
        [{"customer_id": 99}, {"vehicle_id": 99}],
    )
    async def test_reservation_must_match_customer_and_vehicle(
        self, mock_uow, review_repo, reservation_repo, vehicle_repo, overrides
    ):
        use_case = CreateReview(mock_uow, review_repo, reservation_repo, vehicle_repo)

        result = await use_case.execute(review_command(**overrides))

        assert result.error.code == "INVALID_INPUT"
        review_repo.create.assert_not_called()

    async def test_unknown_reservation(self, mock_uow, review_repo, reservation_repo, vehicle_repo):
        reservation_repo.get_by_id = AsyncMock(return_value=None)
        use_case = CreateReview(mock_uow, review_repo, reservation_repo, vehicle_repo)

        result = await use_case.execute(review_command())

        assert result.error.code == "INVALID_INPUT"

    async def test_one_review_per_reservation(
        self, mock_uow, review_repo, reservation_repo, vehicle_repo, review
    ):
        review_repo.get_by_reservation_id = AsyncMock(return_value=review)
        use_case = CreateReview(mock_uow, review_repo, reservation_repo, vehicle_repo)

        result = await use_case.execute(review_command())

        assert result.error.code == "REVIEW_ALREADY_EXISTS"
        review_repo.create.assert_not_called()

    async def test_repository_failure_rolls_back(
        self, mock_uow, review_repo, reservation_repo, vehicle_repo
    ):
        review_repo.create = AsyncMock(side_effect=RuntimeError("db down"))
        use_case = CreateReview(mock_uow, review_repo, reservation_repo, vehicle_repo)

        result = await use_case.execute(review_command())

        assert result.error.code == "CREATE_REVIEW_FAILED"
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestManageReviews:

    async def test_approval_updates_vehicle_rating(
        self, mock_uow, review_repo, vehicle_repo, vehicle, review
    ):
        """
        Given a pending review
        When it is approved and approved reviews average 4.25
        Then the vehicle shows 4.3 from 4 reviews
        """
        review.status = ReviewStatus.PENDING
        review_repo.rating_summary = AsyncMock(return_value=(Decimal("4.25"), 4))

        result = await ModerateReview(mock_uow, review_repo, vehicle_repo).execute(
            5, ModerateReviewCommandDTO(status="approved")
        )

        assert result.value.status == "approved"
        assert vehicle.average_rating == Decimal("4.3")
        assert vehicle.total_reviews == 4
        mock_uow.commit.assert_called_once()

    async def test_rejecting_an_approved_review_removes_it_from_the_rating(
        self, mock_uow, review_repo, vehicle_repo, vehicle
    ):
        vehicle.average_rating = Decimal("4.0")
        vehicle.total_reviews = 1
        review_repo.rating_summary = AsyncMock(return_value=(None, 0))

        result = await ModerateReview(mock_uow, review_repo, vehicle_repo).execute(
            5, ModerateReviewCommandDTO(status="rejected")
        )

        assert result.value.status == "rejected"
        assert vehicle.average_rating == Decimal("0.0")
        assert vehicle.total_reviews == 0

    async def test_edit_returns_review_to_moderation(
        self, mock_uow, review_repo, vehicle_repo, review
    ):
        result = await UpdateReview(mock_uow, review_repo, vehicle_repo).execute(
            5, UpdateReviewCommandDTO(comment="Changed my mind")
        )

        assert result.value.status == "pending"
        assert result.value.comment == "Changed my mind"
        assert result.value.rating == 4
        review_repo.rating_summary.assert_called_once_with(3)

    async def test_delete_recomputes_rating(self, mock_uow, review_repo, vehicle_repo, review):
        result = await DeleteReview(mock_uow, review_repo, vehicle_repo).execute(5)

        assert result.is_ok()
        review_repo.delete.assert_called_once_with(review)
        review_repo.rating_summary.assert_called_once_with(3)
        mock_uow.commit.assert_called_once()

    @pytest.mark.parametrize("use_case_cls", [UpdateReview, DeleteReview, ModerateReview])
    async def test_unknown_review(self, mock_uow, review_repo, vehicle_repo, use_case_cls):
        review_repo.get_by_id = AsyncMock(return_value=None)
        use_case = use_case_cls(mock_uow, review_repo, vehicle_repo)

        if use_case_cls is DeleteReview:
            result = await use_case.execute(404)
        elif use_case_cls is UpdateReview:
            result = await use_case.execute(404, UpdateReviewCommandDTO(rating=3))
        else:
            result = await use_case.execute(404, ModerateReviewCommandDTO(status="approved"))

        assert result.error.code == "REVIEW_NOT_FOUND"


@pytest.mark.asyncio
class TestListVehicleReviews:

    async def test_pagination_totals(self, review_repo, review):
        review_repo.list_approved_for_vehicle = AsyncMock(return_value=([review], 21))

        result = await ListVehicleReviews(review_repo).execute(3, page=3, limit=10)

        assert result.value.total_reviews == 21
        assert result.value.total_pages == 3
        assert result.value.current_page == 3
        review_repo.list_approved_for_vehicle.assert_called_once_with(3, offset=20, limit=10)

    async def test_page_must_be_positive(self, review_repo):
        review_repo.list_approved_for_vehicle = AsyncMock()

        result = await ListVehicleReviews(review_repo).execute(3, page=0)

        assert result.error.code == "INVALID_INPUT"
        review_repo.list_approved_for_vehicle.assert_not_called()
