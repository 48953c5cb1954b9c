from src.domain.review import Review
from .dtos import ReviewResponseDTO


def to_review_dto(review: Review) -> ReviewResponseDTO:
    return ReviewResponseDTO(
        id=review.id,
        customer_id=review.customer_id,
        vehicle_id=review.vehicle_id,
        reservation_id=review.reservation_id,
        rating=review.rating,
        comment=review.comment,
        status=review.status.value,
        image_urls=list(review.image_urls or []),
        created_at=review.created_at,
        updated_at=review.updated_at,
    )
