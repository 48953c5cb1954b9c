from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.retrying_payment_gateway import RetryingPaymentGateway
from src.adapter.services.stripe_payment_gateway import StripePaymentGateway
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.pdf_service import PdfService
from src.app.services.vehicle_locks import VehicleLocks

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# One lock table per process, shared by every request
vehicle_locks = VehicleLocks()

_payment_gateway: Optional[PaymentGateway] = None


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_payment_gateway() -> PaymentGateway:
    global _payment_gateway
    if _payment_gateway is None:
        _payment_gateway = RetryingPaymentGateway(
            StripePaymentGateway(
                api_key=ApplicationConfig.STRIPE_SECRET_KEY,
                webhook_secret=ApplicationConfig.STRIPE_WEBHOOK_SECRET,
                timeout=float(ApplicationConfig.PAYMENT_TIMEOUT_SECONDS),
            ),
            max_attempts=int(ApplicationConfig.PAYMENT_MAX_ATTEMPTS),
            base_delay=float(ApplicationConfig.PAYMENT_RETRY_BASE_DELAY),
            max_delay=float(ApplicationConfig.PAYMENT_RETRY_MAX_DELAY),
        )
    return _payment_gateway


def get_vehicle_locks() -> VehicleLocks:
    return vehicle_locks


def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.REFUND_ALERT_WEBHOOK)


def get_pdf_service() -> PdfService:
    return ReportLabPdfService()
