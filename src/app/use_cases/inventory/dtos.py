"""Data Transfer Objects for Inventory Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class RegisterVehicleCommandDTO(BaseModel):
    """
    Command DTO for adding a vehicle to an agency's fleet

    Used as input to RegisterVehicle use case.
    """

    agency_id: int = Field(..., description="Owning agency (user with role agency)")

    brand: str = Field(..., min_length=1, max_length=100)

    model: str = Field(..., min_length=1, max_length=100)

    year: int = Field(..., ge=1900, le=2100)

    color: str = Field(..., min_length=1, max_length=50)

    price_per_day: Decimal = Field(
        ...,
        gt=0,
        description="Daily rental price (must be > 0)"
    )

    plate_number: str = Field(..., min_length=1, max_length=32, description="Registration plate (unique)")

    image_urls: List[str] = Field(
        default_factory=list,
        description="References returned by the file storage service"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "agency_id": 7,
                "brand": "Toyota",
                "model": "Corolla",
                "year": 2022,
                "color": "white",
                "price_per_day": "50.00",
                "plate_number": "AB-123-CD",
                "image_urls": ["vehicles/ab-123-cd/front.jpg"],
            }
        }


class VehicleResponseDTO(BaseModel):
    id: int
    agency_id: int
    brand: str
    model: str
    year: int
    color: str
    price_per_day: Decimal
    plate_number: str
    status: str
    image_urls: List[str]
    average_rating: Decimal = Decimal("0")
    total_reviews: int = 0
    created_at: datetime
    updated_at: datetime


class UpdateVehicleCommandDTO(BaseModel):
    """
    Partial vehicle update; omitted fields keep their value

    status is not updatable here: it is derived from reservations and
    changed through the maintenance endpoints.
    """

    brand: Optional[str] = Field(default=None, min_length=1, max_length=100)

    model: Optional[str] = Field(default=None, min_length=1, max_length=100)

    year: Optional[int] = Field(default=None, ge=1900, le=2100)

    color: Optional[str] = Field(default=None, min_length=1, max_length=50)

    price_per_day: Optional[Decimal] = Field(default=None, gt=0)

    plate_number: Optional[str] = Field(default=None, min_length=1, max_length=32)

    image_urls: Optional[List[str]] = None


class VehicleListResponseDTO(BaseModel):
    vehicles: List[VehicleResponseDTO]
    total: int


class AvailabilityResponseDTO(BaseModel):
    """
    Response DTO for a single vehicle availability check

    available is False when the vehicle is in maintenance or a pending or
    confirmed reservation overlaps the interval.
    """

    vehicle_id: int
    start_date: datetime
    end_date: datetime
    available: bool
    vehicle_status: str


class AvailableVehiclesResponseDTO(BaseModel):
    start_date: datetime
    end_date: datetime
    vehicles: List[VehicleResponseDTO]
    total: int


class InventorySyncResultDTO(BaseModel):
    """Summary of one projection refresh pass over the fleet"""

    total_vehicles_checked: int = Field(..., ge=0)
    vehicles_updated: int = Field(..., ge=0)
    sync_time: datetime
    execution_time_ms: int = Field(..., ge=0)
    payments_expired: int = Field(default=0, ge=0)
