"""Review use cases"""
from .create_review import CreateReview
from .manage_reviews import UpdateReview, DeleteReview, ModerateReview
from .list_vehicle_reviews import ListVehicleReviews
from .dtos import (
    CreateReviewCommandDTO,
    UpdateReviewCommandDTO,
    ModerateReviewCommandDTO,
    ReviewResponseDTO,
    ReviewPageResponseDTO,
)

__all__ = [
    "CreateReview",
    "UpdateReview",
    "DeleteReview",
    "ModerateReview",
    "ListVehicleReviews",
    "CreateReviewCommandDTO",
    "UpdateReviewCommandDTO",
    "ModerateReviewCommandDTO",
    "ReviewResponseDTO",
    "ReviewPageResponseDTO",
]
