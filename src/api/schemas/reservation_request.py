"""Request schemas for Reservation API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from .common import to_naive_utc


class CreateReservationRequestSchema(BaseModel):
    """
    Request schema for booking a vehicle

    Used for POST /reservations endpoint. Dates are ISO 8601 timestamps; the
    interval is [start_date, end_date).
    """

    customer_id: int

    vehicle_id: int

    start_date: datetime

    end_date: datetime

    payment_method_id: str = Field(..., min_length=1)

    @field_validator('start_date', 'end_date')
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 12,
                "vehicle_id": 3,
                "start_date": "2025-07-01T10:00:00",
                "end_date": "2025-07-04T10:00:00",
                "payment_method_id": "pm_card_visa",
            }
        }


class GenerateContractRequestSchema(BaseModel):
    terms: Optional[str] = Field(default=None, max_length=10000)
