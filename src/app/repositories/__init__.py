from .user_repository import UserRepository
from .vehicle_repository import VehicleRepository
from .reservation_repository import ReservationRepository
from .payment_repository import PaymentRepository
from .contract_repository import ContractRepository
from .subscription_plan_repository import SubscriptionPlanRepository
from .subscription_repository import SubscriptionRepository
from .agency_statistics_repository import AgencyStatisticsRepository
from .review_repository import ReviewRepository
from .platform_statistics_repository import PlatformStatisticsRepository
from .analytics_report_repository import AnalyticsReportRepository

__all__ = [
    "UserRepository",
    "VehicleRepository",
    "ReservationRepository",
    "PaymentRepository",
    "ContractRepository",
    "SubscriptionPlanRepository",
    "SubscriptionRepository",
    "AgencyStatisticsRepository",
    "ReviewRepository",
    "PlatformStatisticsRepository",
    "AnalyticsReportRepository",
]
