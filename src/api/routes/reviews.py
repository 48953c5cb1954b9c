"""Review API Routes

FastAPI routes for customer reviews and their moderation.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.reviews import (
    CreateReview,
    UpdateReview,
    DeleteReview,
    ModerateReview,
    ListVehicleReviews,
    CreateReviewCommandDTO,
    UpdateReviewCommandDTO,
    ModerateReviewCommandDTO,
    ReviewResponseDTO,
    ReviewPageResponseDTO,
)
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.review_repository import SqlAlchemyReviewRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.review_request import (
    CreateReviewRequestSchema,
    UpdateReviewRequestSchema,
    ModerateReviewRequestSchema,
)
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def _managing_use_case(cls, session: AsyncSession):
    return cls(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyReviewRepository(session),
        SqlAlchemyVehicleRepository(session),
    )


@router.post(
    "",
    response_model=ReviewResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Reservation already reviewed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "REVIEW_ALREADY_EXISTS",
                            "message": "Reservation 40 has already been reviewed"
                        }
                    }
                }
            }
        },
    }
)
async def create_review(
    request: CreateReviewRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Review a vehicle the customer reserved.

    The review is `pending` and does not count towards the vehicle's
    rating until approved.

    **Returns:**
    - 201: Review submitted
    - 400: Reservation does not belong to this customer and vehicle
    - 409: Reservation already reviewed
    """
    use_case = CreateReview(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyReviewRepository(session),
        SqlAlchemyReservationRepository(session),
        SqlAlchemyVehicleRepository(session),
    )
    result = await use_case.execute(CreateReviewCommandDTO(**request.model_dump()))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/vehicles/{vehicle_id}", response_model=ReviewPageResponseDTO)
async def list_vehicle_reviews(
    vehicle_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    session: AsyncSession = Depends(get_session)
):
    """
    List a vehicle's approved reviews, newest first.

    **Returns:**
    - 200: One page of reviews with totals
    """
    result = await ListVehicleReviews(SqlAlchemyReviewRepository(session)).execute(
        vehicle_id, page, limit
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/{review_id}", response_model=ReviewResponseDTO)
async def update_review(
    review_id: int,
    request: UpdateReviewRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Edit a review. The edited review goes back to `pending`.

    **Returns:**
    - 200: Review updated
    - 404: Review not found
    """
    command = UpdateReviewCommandDTO(**request.model_dump(exclude_none=True))
    result = await _managing_use_case(UpdateReview, session).execute(review_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/{review_id}/moderation", response_model=ReviewResponseDTO)
async def moderate_review(
    review_id: int,
    request: ModerateReviewRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Approve or reject a review.

    **Returns:**
    - 200: Review moderated; the vehicle rating is recomputed
    - 404: Review not found
    """
    command = ModerateReviewCommandDTO(status=request.status.value)
    result = await _managing_use_case(ModerateReview, session).execute(review_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(review_id: int, session: AsyncSession = Depends(get_session)):
    """
    Delete a review.

    **Returns:**
    - 204: Review deleted
    - 404: Review not found
    """
    result = await _managing_use_case(DeleteReview, session).execute(review_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
