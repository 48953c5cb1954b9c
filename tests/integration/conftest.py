import json
import os
from decimal import Decimal
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import (
    ChargeResult,
    ChargeStatus,
    GatewayError,
    PaymentDeclined,
    PaymentGateway,
    PaymentMethodInfo,
    RefundResult,
    WebhookEvent,
    WebhookSignatureError,
)
from src.app.services.vehicle_locks import VehicleLocks
from src.depends import (
    get_notification_service,
    get_payment_gateway,
    get_session,
    get_vehicle_locks,
)

VALID_SIGNATURE = "t=1,v1=valid"


class FakePaymentGateway(PaymentGateway):
    """
    In-memory processor

    charge_mode: "succeed", "processing", "decline", "fail" or "crash"
    refund_mode: "succeed" or "fail"
    during_charge: optional coroutine function awaited while a charge is in flight
    """

    def __init__(self):
        self.charge_mode = "succeed"
        self.refund_mode = "succeed"
        self.charges: List[Dict] = []
        self.refunds: List[Dict] = []
        self.during_charge = None

    async def charge(
        self,
        customer_ref,
        amount: Decimal,
        currency: str,
        method_ref: str,
        idempotency_key: str,
        description=None,
        metadata=None,
    ) -> ChargeResult:
        self.charges.append(
            {"amount": amount, "currency": currency, "metadata": dict(metadata or {})}
        )
        if self.during_charge is not None:
            await self.during_charge()
        if self.charge_mode == "crash":
            raise RuntimeError("Connection reset by peer")
        if self.charge_mode == "decline":
            raise PaymentDeclined("Your card was declined.", code="card_declined")
        if self.charge_mode == "fail":
            raise GatewayError("Processor unavailable")

        transaction_ref = f"pi_test_{len(self.charges)}"
        if self.charge_mode == "processing":
            return ChargeResult(
                success=False, transaction_ref=transaction_ref, status=ChargeStatus.PROCESSING
            )
        return ChargeResult(success=True, transaction_ref=transaction_ref)

    async def refund(self, transaction_ref: str, amount: Optional[Decimal] = None) -> RefundResult:
        self.refunds.append({"transaction_ref": transaction_ref, "amount": amount})
        if self.refund_mode == "fail":
            raise GatewayError("Refund endpoint unavailable")
        return RefundResult(success=True, refund_ref=f"re_test_{len(self.refunds)}")

    async def retrieve_method(self, method_ref: str) -> PaymentMethodInfo:
        if not method_ref.startswith("pm_"):
            raise PaymentDeclined(f"No such payment_method: '{method_ref}'")
        return PaymentMethodInfo(valid=True, details={"type": "card", "card_brand": "visa"})

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != VALID_SIGNATURE:
            raise WebhookSignatureError("No signatures found matching the expected signature")
        data = json.loads(payload)
        obj = data["data"]["object"]
        return WebhookEvent(
            event_id=data["id"],
            event_type=data["type"],
            transaction_ref=obj.get("id"),
            metadata=obj.get("metadata", {}),
        )


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.alerts = []

    async def send_refund_failure_alert(self, payment, reason: str) -> bool:
        self.alerts.append((payment.id, reason))
        return True


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine (TEST_DB_URI, or a throwaway SQLite file)"""
    test_db_url = os.getenv("TEST_DB_URI", f"sqlite+aiosqlite:///{tmp_path}/test.db")

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def payment_gateway():
    return FakePaymentGateway()


@pytest.fixture
def notification_service():
    return RecordingNotificationService()


@pytest.fixture
def vehicle_locks():
    return VehicleLocks()


@pytest_asyncio.fixture
async def client(session_factory, payment_gateway, notification_service, vehicle_locks):
    """Create test client with every external dependency overridden"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # One session per request, as in production
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_notification_service] = lambda: notification_service
    app.dependency_overrides[get_vehicle_locks] = lambda: vehicle_locks

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def agency(client):
    response = await client.post(
        "/users",
        json={
            "email": "fleet@citycars.example",
            "role": "agency",
            "name": "City Cars",
            "profile": {"name": "City Cars", "address": "1 Harbour Road"},
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def customer(client):
    response = await client.post(
        "/users",
        json={
            "email": "jane@example.com",
            "role": "customer",
            "name": "Jane Doe",
            "profile": {"first_name": "Jane", "last_name": "Doe"},
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def vehicle(client, agency):
    response = await client.post(
        "/vehicles",
        json={
            "agency_id": agency["id"],
            "brand": "Toyota",
            "model": "Corolla",
            "year": 2022,
            "color": "white",
            "price_per_day": "50.00",
            "plate_number": "AB-123-CD",
        },
    )
    assert response.status_code == 201
    return response.json()
