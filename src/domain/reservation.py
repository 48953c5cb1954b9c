"""Reservation Domain Entity

A customer's booking of a vehicle over a half-open interval
[start_date, end_date).
"""

import math
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, DateTime, CheckConstraint
from src.domain.base import BaseModel, IdType


class ReservationStatus(str, Enum):
    """Reservation lifecycle states"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold the vehicle for their interval
BLOCKING_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
    ReservationStatus.CONFIRMED: {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED},
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
}

ONE_DAY = timedelta(days=1)


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def intervals_overlap(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Half-open overlap test; touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b


def rental_days(start_date: datetime, end_date: datetime) -> int:
    """Whole days billed for [start_date, end_date), partial days round up."""
    return math.ceil((end_date - start_date) / ONE_DAY)


def calculate_total_price(
    price_per_day: Decimal, start_date: datetime, end_date: datetime
) -> Decimal:
    total = Decimal(price_per_day) * rental_days(start_date, end_date)
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class Reservation(BaseModel, table=True):
    """
    Reservation - Vehicle booking

    Domain Rules:
    - end_date > start_date
    - Status transitions: pending -> confirmed -> completed,
      pending|confirmed -> cancelled
    - No two pending/confirmed reservations of a vehicle overlap
      (serialized per vehicle at creation time)
    - total_price = price_per_day * ceil(duration in days)
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint('end_date > start_date', name='reservation_interval_valid'),
        Index('ix_reservations_vehicle_interval', 'vehicle_id', 'start_date', 'end_date'),
        Index('ix_reservations_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique reservation identifier (auto-increment)"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=False, index=True),
        description="Customer making the booking"
    )

    vehicle_id: int = Field(
        sa_column=Column(IdType, ForeignKey("vehicles.id"), nullable=False),
        description="Booked vehicle"
    )

    start_date: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Interval start (inclusive)"
    )

    end_date: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Interval end (exclusive)"
    )

    status: ReservationStatus = Field(
        default=ReservationStatus.PENDING,
        description="Lifecycle status (pending, confirmed, completed, cancelled)"
    )

    total_price: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Price charged for the whole interval"
    )

    payment_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("payments.id"), nullable=True),
        description="Payment that settles this reservation"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def overlaps(self, start_date: datetime, end_date: datetime) -> bool:
        return intervals_overlap(self.start_date, self.end_date, start_date, end_date)
