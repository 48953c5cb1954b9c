"""Platform Statistics

Daily snapshot of marketplace-wide counters. One row per calendar day;
regenerating on the same day overwrites that day's row.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Date, Numeric
from src.domain.base import BaseModel, IdType


class PlatformStatistics(BaseModel, table=True):
    __tablename__ = "platform_statistics"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    period: date = Field(
        sa_column=Column(Date, nullable=False, unique=True),
        description="Day the snapshot describes"
    )

    total_agencies: int = Field(default=0)
    active_agencies: int = Field(default=0)
    total_vehicles: int = Field(default=0)
    total_reservations: int = Field(default=0)

    total_revenue: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
        description="Sum of confirmed and completed bookings"
    )

    average_rating: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(3, 2), nullable=False, default=0),
        description="Mean rating of approved reviews"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
