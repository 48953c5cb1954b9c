"""Review Domain Entity

Customer feedback on a vehicle, tied to the reservation it was rented
under. Only approved reviews are public and count towards the vehicle's
rating.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, JSON, Text
from src.domain.base import BaseModel, IdType


class ReviewStatus(str, Enum):
    """Moderation states"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Review(BaseModel, table=True):
    """
    Review - Rating and comment left by a customer

    Domain Rules:
    - One review per reservation (reservation_id is unique)
    - The reservation must belong to the reviewing customer and vehicle
    - rating is an integer from 1 to 5
    - New and edited reviews wait for moderation (status pending)
    """

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint('rating >= 1 AND rating <= 5', name='rating_range'),
        Index('ix_reviews_vehicle_status', 'vehicle_id', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=False),
    )

    vehicle_id: int = Field(
        sa_column=Column(IdType, ForeignKey("vehicles.id"), nullable=False),
    )

    reservation_id: int = Field(
        sa_column=Column(IdType, ForeignKey("reservations.id"), nullable=False, unique=True),
        description="Reservation the review is about (unique)"
    )

    rating: int = Field(description="1 to 5 stars")

    comment: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    status: ReviewStatus = Field(default=ReviewStatus.PENDING)

    image_urls: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="References returned by the file storage service"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
