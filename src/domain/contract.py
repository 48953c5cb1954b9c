"""Contract Domain Entity

Rental agreement generated from a confirmed reservation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, DateTime, Text
from src.domain.base import BaseModel, IdType


class ContractStatus(str, Enum):
    """Contract states"""
    ACTIVE = "active"
    COMPLETED = "completed"
    TERMINATED = "terminated"


class Contract(BaseModel, table=True):
    """
    Contract - Rental agreement

    Domain Rules:
    - One contract per reservation (reservation_id is unique)
    - Only generated from a confirmed reservation
    - Deleted together with its reservation
    """

    __tablename__ = "contracts"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique contract identifier (auto-increment)"
    )

    reservation_id: int = Field(
        sa_column=Column(
            IdType,
            ForeignKey("reservations.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        description="Originating reservation (unique)"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=False),
    )

    vehicle_id: int = Field(
        sa_column=Column(IdType, ForeignKey("vehicles.id"), nullable=False),
    )

    start_date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    end_date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    status: ContractStatus = Field(default=ContractStatus.ACTIVE)

    terms: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-text contract terms"
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
