"""UpdateReview / DeleteReview / ModerateReview Use Cases

Every change re-derives the vehicle's rating: an edit or deletion can take
an approved review out of the average just as moderation can put one in.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.review import ReviewStatus
from .dtos import ModerateReviewCommandDTO, ReviewResponseDTO, UpdateReviewCommandDTO
from .mappers import to_review_dto
from .rating import refresh_vehicle_rating

logger = logging.getLogger(__name__)


def _not_found(review_id: int) -> Error:
    return Error(code="REVIEW_NOT_FOUND", message=f"Review {review_id} not found")


class UpdateReview:
    """Edits return the review to pending until it is moderated again"""

    def __init__(self, uow: UnitOfWork, review_repo: ReviewRepository, vehicle_repo: VehicleRepository):
        self.uow = uow
        self.review_repo = review_repo
        self.vehicle_repo = vehicle_repo

    async def execute(self, review_id: int, command: UpdateReviewCommandDTO) -> Result[ReviewResponseDTO]:
        try:
            review = await self.review_repo.get_by_id(review_id)
            if not review:
                return Return.err(_not_found(review_id))

            for field, value in command.model_dump(exclude_none=True).items():
                setattr(review, field, value)
            review.status = ReviewStatus.PENDING

            review = await self.review_repo.update(review)
            await refresh_vehicle_rating(self.vehicle_repo, self.review_repo, review.vehicle_id)
            await self.uow.commit()

            return Return.ok(to_review_dto(review))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="UPDATE_REVIEW_FAILED", message="Failed to update review", reason=str(e))
            )


class DeleteReview:

    def __init__(self, uow: UnitOfWork, review_repo: ReviewRepository, vehicle_repo: VehicleRepository):
        self.uow = uow
        self.review_repo = review_repo
        self.vehicle_repo = vehicle_repo

    async def execute(self, review_id: int) -> Result[None]:
        try:
            review = await self.review_repo.get_by_id(review_id)
            if not review:
                return Return.err(_not_found(review_id))

            vehicle_id = review.vehicle_id
            await self.review_repo.delete(review)
            await refresh_vehicle_rating(self.vehicle_repo, self.review_repo, vehicle_id)
            await self.uow.commit()
            logger.info(f"Review {review_id} deleted")

            return Return.ok(None)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="DELETE_REVIEW_FAILED", message="Failed to delete review", reason=str(e))
            )


class ModerateReview:
    """
    Use Case: Approve or reject a review (admin)

    Rejecting a previously approved review removes it from the rating too.
    """

    def __init__(self, uow: UnitOfWork, review_repo: ReviewRepository, vehicle_repo: VehicleRepository):
        self.uow = uow
        self.review_repo = review_repo
        self.vehicle_repo = vehicle_repo

    async def execute(self, review_id: int, command: ModerateReviewCommandDTO) -> Result[ReviewResponseDTO]:
        try:
            review = await self.review_repo.get_by_id(review_id)
            if not review:
                return Return.err(_not_found(review_id))

            review.status = ReviewStatus(command.status)
            review = await self.review_repo.update(review)
            await refresh_vehicle_rating(self.vehicle_repo, self.review_repo, review.vehicle_id)
            await self.uow.commit()
            logger.info(f"Review {review_id} moderated: {review.status.value}")

            return Return.ok(to_review_dto(review))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(code="MODERATE_REVIEW_FAILED", message="Failed to moderate review", reason=str(e))
            )
