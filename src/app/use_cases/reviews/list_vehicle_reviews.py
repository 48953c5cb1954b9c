"""ListVehicleReviews Use Case"""

import math
from libs.result import Result, Return, Error
from src.app.repositories.review_repository import ReviewRepository
from .dtos import ReviewPageResponseDTO
from .mappers import to_review_dto

DEFAULT_PAGE_SIZE = 10


class ListVehicleReviews:
    """Public, paginated listing of a vehicle's approved reviews"""

    def __init__(self, review_repo: ReviewRepository):
        self.review_repo = review_repo

    async def execute(
        self, vehicle_id: int, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> Result[ReviewPageResponseDTO]:
        if page < 1 or limit < 1:
            return Return.err(
                Error(code="INVALID_INPUT", message="page and limit must be positive")
            )

        try:
            reviews, total = await self.review_repo.list_approved_for_vehicle(
                vehicle_id, offset=(page - 1) * limit, limit=limit
            )
            return Return.ok(
                ReviewPageResponseDTO(
                    vehicle_id=vehicle_id,
                    total_reviews=total,
                    total_pages=math.ceil(total / limit),
                    current_page=page,
                    reviews=[to_review_dto(r) for r in reviews],
                )
            )

        except Exception as e:
            return Return.err(
                Error(code="LIST_REVIEWS_FAILED", message="Failed to retrieve reviews", reason=str(e))
            )
