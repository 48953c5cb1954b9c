"""Data Transfer Objects for Statistics Use Cases"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class AgencyStatisticsResponseDTO(BaseModel):
    """
    Cached rollup of an agency's fleet and bookings

    Rates are percentages rounded to two decimals; 0 when there is nothing
    to divide by.
    """

    agency_id: int

    total_vehicles: int = Field(..., ge=0)
    available_vehicles: int = Field(..., ge=0)
    reserved_vehicles: int = Field(..., ge=0)
    maintenance_vehicles: int = Field(..., ge=0)

    total_reservations: int = Field(..., ge=0)
    confirmed_reservations: int = Field(..., ge=0)
    completed_reservations: int = Field(..., ge=0)
    cancelled_reservations: int = Field(..., ge=0)

    total_revenue: Decimal = Field(..., description="Sum of confirmed and completed bookings")
    occupancy_rate: Decimal = Field(..., description="Reserved vehicles / total vehicles (%)")
    cancellation_rate: Decimal = Field(..., description="Cancelled / total reservations (%)")

    last_updated: datetime


class AgencyPerformanceResponseDTO(BaseModel):
    """Rates read from an agency's cached statistics for a requested period"""

    agency_id: int
    occupancy_rate: Decimal
    cancellation_rate: Decimal
    total_revenue: Decimal
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    statistics_updated: datetime


class PlatformStatisticsResponseDTO(BaseModel):
    period: date
    total_agencies: int = Field(..., ge=0)
    active_agencies: int = Field(..., ge=0)
    total_vehicles: int = Field(..., ge=0)
    total_reservations: int = Field(..., ge=0)
    total_revenue: Decimal
    average_rating: Decimal = Field(..., description="Mean of approved review ratings")
    updated_at: datetime


class PlatformGrowthResponseDTO(BaseModel):
    """
    Percent change between the latest snapshot and the one before it

    Growth figures are None when there is no earlier snapshot in the last
    month or when the earlier value is 0.
    """

    period: str = "monthly"
    current_period: date
    previous_period: Optional[date] = None
    agency_growth: Optional[Decimal] = None
    vehicle_growth: Optional[Decimal] = None
    reservation_growth: Optional[Decimal] = None
    revenue_growth: Optional[Decimal] = None
    message: Optional[str] = None
