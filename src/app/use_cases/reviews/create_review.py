"""CreateReview Use Case

Records a customer's review of a vehicle they reserved.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.reservation_repository import ReservationRepository
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.review import Review, ReviewStatus
from .dtos import CreateReviewCommandDTO, ReviewResponseDTO
from .mappers import to_review_dto
from .rating import refresh_vehicle_rating

logger = logging.getLogger(__name__)


class CreateReview:
    """
    Use Case: Review a rented vehicle

    Business Rules:
    1. The reservation must exist and belong to the customer and vehicle
    2. One review per reservation
    3. The review starts pending and is hidden until approved
    """

    def __init__(
        self,
        uow: UnitOfWork,
        review_repo: ReviewRepository,
        reservation_repo: ReservationRepository,
        vehicle_repo: VehicleRepository,
    ):
        self.uow = uow
        self.review_repo = review_repo
        self.reservation_repo = reservation_repo
        self.vehicle_repo = vehicle_repo

    async def execute(self, command: CreateReviewCommandDTO) -> Result[ReviewResponseDTO]:
        try:
            reservation = await self.reservation_repo.get_by_id(command.reservation_id)
            if (
                not reservation
                or reservation.customer_id != command.customer_id
                or reservation.vehicle_id != command.vehicle_id
            ):
                return Return.err(
                    Error(
                        code="INVALID_INPUT",
                        message="Invalid reservation for review",
                        reason=f"reservation {command.reservation_id} does not match customer and vehicle",
                    )
                )

            existing = await self.review_repo.get_by_reservation_id(command.reservation_id)
            if existing:
                return Return.err(
                    Error(
                        code="REVIEW_ALREADY_EXISTS",
                        message=f"Reservation {command.reservation_id} has already been reviewed",
                    )
                )

            review = await self.review_repo.create(
                Review(
                    customer_id=command.customer_id,
                    vehicle_id=command.vehicle_id,
                    reservation_id=command.reservation_id,
                    rating=command.rating,
                    comment=command.comment,
                    status=ReviewStatus.PENDING,
                    image_urls=command.image_urls,
                )
            )
            await refresh_vehicle_rating(self.vehicle_repo, self.review_repo, command.vehicle_id)
            await self.uow.commit()
            logger.info(f"Review {review.id} submitted for vehicle {command.vehicle_id}")

            return Return.ok(to_review_dto(review))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_REVIEW_FAILED",
                    message="Failed to create review",
                    reason=str(e),
                )
            )
