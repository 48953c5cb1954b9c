"""Request schemas for Review API"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.review import ReviewStatus


class CreateReviewRequestSchema(BaseModel):
    """
    Request schema for reviewing a rented vehicle

    Used for POST /reviews endpoint.
    """

    customer_id: int

    vehicle_id: int

    reservation_id: int

    rating: int = Field(..., ge=1, le=5, description="Stars, 1 to 5")

    comment: Optional[str] = Field(default=None, max_length=5000)

    image_urls: List[str] = Field(default_factory=list)

    @field_validator('comment')
    @classmethod
    def strip_comment(cls, v):
        if v is None:
            return v
        return v.strip() or None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 12,
                "vehicle_id": 3,
                "reservation_id": 40,
                "rating": 4,
                "comment": "Great car, late pickup.",
            }
        }


class UpdateReviewRequestSchema(BaseModel):
    """Used for PATCH /reviews/{review_id}. Omitted fields are left unchanged."""

    rating: Optional[int] = Field(default=None, ge=1, le=5)

    comment: Optional[str] = Field(default=None, max_length=5000)

    image_urls: Optional[List[str]] = None


class ModerateReviewRequestSchema(BaseModel):
    status: ReviewStatus
