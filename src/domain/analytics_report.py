"""Analytics Report

A generated report over a date window, optionally scoped to one agency.
The computed figures are stored with the report so it can be fetched
again without recomputing.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, JSON, String
from src.domain.base import BaseModel, IdType, generate_uuid


class ReportType(str, Enum):
    REVENUE = "revenue"
    USAGE = "usage"
    PERFORMANCE = "performance"


class AnalyticsReport(BaseModel, table=True):
    __tablename__ = "analytics_reports"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    report_ref: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), nullable=False, unique=True),
        description="Public report identifier"
    )

    report_type: ReportType

    start_date: datetime

    end_date: datetime

    agency_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("users.id"), nullable=True),
        description="Agency the report is scoped to; None for the whole platform"
    )

    data: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
