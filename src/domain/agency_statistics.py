"""Agency Statistics

Cached rollup of an agency's inventory and reservations. Derived data only,
regenerated on demand.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, Numeric
from src.domain.base import BaseModel, IdType


class AgencyStatistics(BaseModel, table=True):
    __tablename__ = "agency_statistics"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    agency_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=False, unique=True),
    )

    total_vehicles: int = Field(default=0)
    available_vehicles: int = Field(default=0)
    reserved_vehicles: int = Field(default=0)
    maintenance_vehicles: int = Field(default=0)

    total_reservations: int = Field(default=0)
    confirmed_reservations: int = Field(default=0)
    completed_reservations: int = Field(default=0)
    cancelled_reservations: int = Field(default=0)

    total_revenue: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(12, 2), nullable=False, default=0),
    )

    occupancy_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Reserved vehicles as a percentage of all vehicles"
    )

    cancellation_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False, default=0),
        description="Cancelled reservations as a percentage of all reservations"
    )

    last_updated: datetime = Field(default_factory=datetime.utcnow)
