"""Data Transfer Objects for Reservation Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateReservationCommandDTO(BaseModel):
    """
    Command DTO for booking a vehicle

    The interval is half-open: [start_date, end_date). end_date <= start_date
    is rejected by the use case with INVALID_INPUT.
    """

    customer_id: int = Field(..., description="Customer making the booking")

    vehicle_id: int = Field(..., description="Vehicle to book")

    start_date: datetime = Field(..., description="Rental start (inclusive)")

    end_date: datetime = Field(..., description="Rental end (exclusive)")

    payment_method_id: str = Field(
        ...,
        min_length=1,
        description="Gateway payment method to charge"
    )

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


class ReservationResponseDTO(BaseModel):
    """
    Response DTO for a reservation

    warnings carries non-fatal problems, e.g. a refund that could not be
    issued while cancelling.
    """

    id: int
    customer_id: int
    vehicle_id: int
    start_date: datetime
    end_date: datetime
    status: str
    total_price: Decimal
    payment_id: Optional[int] = None
    payment_status: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    warnings: List[str] = Field(default_factory=list)


class GenerateContractCommandDTO(BaseModel):
    terms: Optional[str] = Field(
        default=None,
        max_length=10000,
        description="Custom terms; defaults to a summary of the rental"
    )


class ContractResponseDTO(BaseModel):
    id: int
    reservation_id: int
    customer_id: int
    vehicle_id: int
    start_date: datetime
    end_date: datetime
    status: str
    terms: Optional[str] = None
    created_at: datetime


class ContractPdfResponseDTO(BaseModel):
    """Rendered contract document"""

    contract_id: int
    filename: str
    pdf_base64: str = Field(..., description="PDF document, base64-encoded")
    generated_at: datetime
