"""Request schemas for Analytics API"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from src.domain.analytics_report import ReportType


class GenerateReportRequestSchema(BaseModel):
    """
    Request schema for generating an analytics report

    Used for POST /analytics/reports endpoint.
    """

    report_type: ReportType

    start_date: datetime

    end_date: datetime

    agency_id: Optional[int] = Field(default=None, description="Omit for a platform-wide report")

    class Config:
        json_schema_extra = {
            "example": {
                "report_type": "revenue",
                "start_date": "2030-01-01T00:00:00",
                "end_date": "2030-02-01T00:00:00",
                "agency_id": 7,
            }
        }
