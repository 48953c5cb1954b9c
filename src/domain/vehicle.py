"""Vehicle Domain Entity

Rental inventory owned by an agency. ``status`` is a projection of the
reservation table maintained by the inventory ledger; only maintenance is
set directly.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, JSON, Numeric, String, CheckConstraint
from src.domain.base import BaseModel, IdType


class VehicleStatus(str, Enum):
    """Vehicle availability states"""
    AVAILABLE = "available"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class Vehicle(BaseModel, table=True):
    """
    Vehicle - A rentable car

    Domain Rules:
    - plate_number is unique
    - price_per_day must be positive
    - Owned by exactly one agency
    - status is never AVAILABLE while a confirmed reservation overlaps today
    - average_rating and total_reviews only count approved reviews
    """

    __tablename__ = "vehicles"
    __table_args__ = (
        CheckConstraint('price_per_day > 0', name='price_per_day_positive'),
        Index('ix_vehicles_agency_id', 'agency_id'),
        Index('ix_vehicles_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique vehicle identifier (auto-increment)"
    )

    agency_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=False),
        description="Owning agency (user with role agency)"
    )

    brand: str = Field(sa_column=Column(String(100), nullable=False))

    model: str = Field(sa_column=Column(String(100), nullable=False))

    year: int = Field(description="Model year")

    color: str = Field(sa_column=Column(String(50), nullable=False))

    price_per_day: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Daily rental price (precision: 10,2)"
    )

    plate_number: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True),
        description="Registration plate (unique)"
    )

    status: VehicleStatus = Field(
        default=VehicleStatus.AVAILABLE,
        description="Availability projection (available, reserved, maintenance)"
    )

    image_urls: List[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="References returned by the file storage service"
    )

    average_rating: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(2, 1), nullable=False, default=0),
        description="Mean rating of approved reviews, one decimal"
    )

    total_reviews: int = Field(default=0, description="Number of approved reviews")

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "agency_id": 7,
                "brand": "Toyota",
                "model": "Corolla",
                "year": 2022,
                "color": "white",
                "price_per_day": "50.00",
                "plate_number": "AB-123-CD",
                "status": "available",
                "image_urls": [],
            }
        }
