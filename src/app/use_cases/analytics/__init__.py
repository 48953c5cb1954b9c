"""Analytics report use cases"""
from .generate_report import GenerateAnalyticsReport, GetAnalyticsReport
from .compare_performance import CompareAgencyPerformance
from .dtos import (
    GenerateReportCommandDTO,
    AnalyticsReportResponseDTO,
    PerformanceFiguresDTO,
    PerformanceComparisonResponseDTO,
)

__all__ = [
    "GenerateAnalyticsReport",
    "GetAnalyticsReport",
    "CompareAgencyPerformance",
    "GenerateReportCommandDTO",
    "AnalyticsReportResponseDTO",
    "PerformanceFiguresDTO",
    "PerformanceComparisonResponseDTO",
]
