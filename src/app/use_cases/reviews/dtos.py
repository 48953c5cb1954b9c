"""Data Transfer Objects for Review Use Cases"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateReviewCommandDTO(BaseModel):
    """
    Command DTO for reviewing a rented vehicle

    reservation_id must be a reservation of customer_id for vehicle_id.
    """

    customer_id: int

    vehicle_id: int

    reservation_id: int

    rating: int = Field(..., ge=1, le=5)

    comment: Optional[str] = Field(default=None, max_length=5000)

    image_urls: List[str] = Field(
        default_factory=list,
        description="References returned by the file storage service"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 12,
                "vehicle_id": 3,
                "reservation_id": 40,
                "rating": 5,
                "comment": "Clean car, smooth pickup.",
            }
        }


class UpdateReviewCommandDTO(BaseModel):
    """Edits send the review back to moderation; omitted fields keep their value"""

    rating: Optional[int] = Field(default=None, ge=1, le=5)

    comment: Optional[str] = Field(default=None, max_length=5000)

    image_urls: Optional[List[str]] = None


class ModerateReviewCommandDTO(BaseModel):
    status: str = Field(..., pattern="^(pending|approved|rejected)$")


class ReviewResponseDTO(BaseModel):
    id: int
    customer_id: int
    vehicle_id: int
    reservation_id: int
    rating: int
    comment: Optional[str] = None
    status: str
    image_urls: List[str]
    created_at: datetime
    updated_at: datetime


class ReviewPageResponseDTO(BaseModel):
    """One page of a vehicle's approved reviews, newest first"""

    vehicle_id: int
    total_reviews: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    current_page: int = Field(..., ge=1)
    reviews: List[ReviewResponseDTO]
