"""Data Transfer Objects for Analytics Use Cases"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class GenerateReportCommandDTO(BaseModel):
    """
    Command DTO for generating an analytics report

    The window is [start_date, end_date); reservations are attributed to the
    window their start_date falls in.
    """

    report_type: str = Field(..., pattern="^(revenue|usage|performance)$")

    start_date: datetime

    end_date: datetime

    agency_id: Optional[int] = Field(
        default=None,
        description="Scope the report to one agency; the whole platform when omitted"
    )


class AnalyticsReportResponseDTO(BaseModel):
    id: int
    report_ref: str
    report_type: str
    start_date: datetime
    end_date: datetime
    agency_id: Optional[int] = None
    data: Dict[str, Any]
    created_at: datetime


class PerformanceFiguresDTO(BaseModel):
    total_reservations: Decimal
    average_rating: Decimal
    cancellation_rate: Decimal
    revenue_per_vehicle: Decimal


class PerformanceComparisonResponseDTO(BaseModel):
    """
    An agency's performance against the platform average

    The platform reservation count is averaged over agencies; difference is
    agency minus platform for every figure.
    """

    agency_id: int
    start_date: datetime
    end_date: datetime
    agency: PerformanceFiguresDTO
    platform: PerformanceFiguresDTO
    difference: PerformanceFiguresDTO
