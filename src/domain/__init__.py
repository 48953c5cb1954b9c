from .base import BaseModel, generate_uuid
from .user import User, UserRole
from .vehicle import Vehicle, VehicleStatus
from .payment import Payment, PaymentStatus, PaymentReferenceType
from .reservation import Reservation, ReservationStatus
from .contract import Contract, ContractStatus
from .subscription_plan import SubscriptionPlan
from .subscription import Subscription, SubscriptionStatus
from .agency_statistics import AgencyStatistics
from .review import Review, ReviewStatus
from .platform_statistics import PlatformStatistics
from .analytics_report import AnalyticsReport, ReportType

__all__ = [
    "BaseModel",
    "generate_uuid",
    "User",
    "UserRole",
    "Vehicle",
    "VehicleStatus",
    "Payment",
    "PaymentStatus",
    "PaymentReferenceType",
    "Reservation",
    "ReservationStatus",
    "Contract",
    "ContractStatus",
    "SubscriptionPlan",
    "Subscription",
    "SubscriptionStatus",
    "AgencyStatistics",
    "Review",
    "ReviewStatus",
    "PlatformStatistics",
    "AnalyticsReport",
    "ReportType",
]
