"""Request schemas for Vehicle API"""

from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class RegisterVehicleRequestSchema(BaseModel):
    """
    Request schema for registering a vehicle

    Used for POST /vehicles endpoint.
    """

    agency_id: int

    brand: str = Field(..., min_length=1, max_length=100)

    model: str = Field(..., min_length=1, max_length=100)

    year: int = Field(..., ge=1900, le=2100)

    color: str = Field(..., min_length=1, max_length=50)

    price_per_day: Decimal = Field(..., description="Daily rental price (must be > 0)")

    plate_number: str = Field(..., min_length=1, max_length=32)

    image_urls: List[str] = Field(default_factory=list)

    @field_validator('price_per_day')
    @classmethod
    def validate_price(cls, v):
        """Ensure price is positive"""
        if v <= 0:
            raise ValueError("price_per_day must be greater than 0")
        return v

    @field_validator('plate_number')
    @classmethod
    def normalize_plate(cls, v):
        return v.strip().upper()

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
            }
        }


class UpdateVehicleRequestSchema(BaseModel):
    """
    Request schema for editing a vehicle

    Used for PATCH /vehicles/{vehicle_id}. Omitted fields are left unchanged.
    """

    brand: Optional[str] = Field(default=None, min_length=1, max_length=100)

    model: Optional[str] = Field(default=None, min_length=1, max_length=100)

    year: Optional[int] = Field(default=None, ge=1900, le=2100)

    color: Optional[str] = Field(default=None, min_length=1, max_length=50)

    price_per_day: Optional[Decimal] = None

    plate_number: Optional[str] = Field(default=None, min_length=1, max_length=32)

    image_urls: Optional[List[str]] = None

    @field_validator('price_per_day')
    @classmethod
    def validate_price(cls, v):
        if v is not None and v <= 0:
            raise ValueError("price_per_day must be greater than 0")
        return v

    @field_validator('plate_number')
    @classmethod
    def normalize_plate(cls, v):
        return v.strip().upper() if v is not None else v

    class Config:
        json_schema_extra = {"example": {"price_per_day": "55.00", "color": "silver"}}
