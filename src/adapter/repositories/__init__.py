from .user_repository import SqlAlchemyUserRepository
from .vehicle_repository import SqlAlchemyVehicleRepository
from .reservation_repository import SqlAlchemyReservationRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .contract_repository import SqlAlchemyContractRepository
from .subscription_plan_repository import SqlAlchemySubscriptionPlanRepository
from .subscription_repository import SqlAlchemySubscriptionRepository
from .agency_statistics_repository import SqlAlchemyAgencyStatisticsRepository
from .review_repository import SqlAlchemyReviewRepository
from .platform_statistics_repository import SqlAlchemyPlatformStatisticsRepository
from .analytics_report_repository import SqlAlchemyAnalyticsReportRepository

__all__ = [
    "SqlAlchemyUserRepository",
    "SqlAlchemyVehicleRepository",
    "SqlAlchemyReservationRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyContractRepository",
    "SqlAlchemySubscriptionPlanRepository",
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyAgencyStatisticsRepository",
    "SqlAlchemyReviewRepository",
    "SqlAlchemyPlatformStatisticsRepository",
    "SqlAlchemyAnalyticsReportRepository",
]
