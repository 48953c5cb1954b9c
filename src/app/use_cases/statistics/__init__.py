"""Statistics use cases"""
from .generate_agency_statistics import GenerateAgencyStatistics
from .get_agency_statistics import GetAgencyStatistics
from .get_agency_performance import GetAgencyPerformance
from .platform_statistics import GeneratePlatformStatistics, CalculatePlatformGrowth
from .dtos import (
    AgencyStatisticsResponseDTO,
    AgencyPerformanceResponseDTO,
    PlatformStatisticsResponseDTO,
    PlatformGrowthResponseDTO,
)

__all__ = [
    "GenerateAgencyStatistics",
    "GetAgencyStatistics",
    "GetAgencyPerformance",
    "GeneratePlatformStatistics",
    "CalculatePlatformGrowth",
    "AgencyStatisticsResponseDTO",
    "AgencyPerformanceResponseDTO",
    "PlatformStatisticsResponseDTO",
    "PlatformGrowthResponseDTO",
]
