"""Unit tests for InventorySyncWorker

Tests cover:
- Worker initialization with configuration
- run_once expires stale payments, then delegates to SyncInventory
- Sync disabled scenario
- Failure surfaces as RuntimeError
- Shutdown disposes the engine
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.inventory import InventorySyncResultDTO
from src.app.use_cases.payments import ExpireStalePaymentsResultDTO
from src.worker.inventory_sync import InventorySyncWorker


@pytest.fixture
def mock_session():
    """Mock async session"""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return session


@pytest.fixture
def sample_result():
    return InventorySyncResultDTO(
        total_vehicles_checked=12,
        vehicles_updated=3,
        sync_time=datetime(2025, 7, 1),
        execution_time_ms=40,
    )


@pytest.fixture
def expiry_result():
    return ExpireStalePaymentsResultDTO(
        payments_checked=2,
        payments_expired=2,
        reservations_cancelled=1,
        subscriptions_cancelled=1,
        payments_failed=0,
        cutoff=datetime(2025, 7, 1, 5, 30),
        execution_time_ms=5,
    )


@pytest.fixture
def worker(mock_session):
    with patch("src.worker.inventory_sync.create_async_engine") as mock_create_engine:
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine
        worker = InventorySyncWorker(db_uri="sqlite+aiosqlite:///:memory:")
    worker.async_session_factory = MagicMock(return_value=mock_session)
    return worker


def use_case_returning(result):
    use_case = MagicMock()
    use_case.execute = AsyncMock(return_value=result)
    return use_case


class TestInventorySyncWorkerInit:

    @patch("src.worker.inventory_sync.ApplicationConfig")
    @patch("src.worker.inventory_sync.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.return_value = MagicMock()

        worker = InventorySyncWorker()

        assert worker.db_uri == "postgresql+asyncpg://default@localhost/db"
        mock_create_engine.assert_called_once()


@pytest.mark.asyncio
class TestInventorySyncWorkerRun:

    @patch("src.worker.inventory_sync.ExpireStalePayments")
    @patch("src.worker.inventory_sync.SyncInventory")
    @patch("src.worker.inventory_sync.ApplicationConfig")
    async def test_run_once_returns_summary(
        self, mock_app_config, mock_use_case_cls, mock_expiry_cls, worker, sample_result, expiry_result
    ):
        mock_app_config.INVENTORY_SYNC_ENABLED = True
        mock_app_config.PENDING_PAYMENT_TTL_MINUTES = 45
        mock_use_case = use_case_returning(Return.ok(sample_result))
        mock_use_case_cls.return_value = mock_use_case
        mock_expiry = use_case_returning(Return.ok(expiry_result))
        mock_expiry_cls.return_value = mock_expiry
        as_of = datetime(2025, 7, 1, 6, 0)

        result = await worker.run_once(as_of)

        assert result.vehicles_updated == 3
        assert result.payments_expired == 2
        mock_use_case.execute.assert_called_once_with(as_of)
        mock_expiry.execute.assert_called_once_with(as_of)
        assert mock_expiry_cls.call_args.kwargs["ttl_minutes"] == 45

    @patch("src.worker.inventory_sync.ExpireStalePayments")
    @patch("src.worker.inventory_sync.SyncInventory")
    @patch("src.worker.inventory_sync.ApplicationConfig")
    async def test_disabled_skips_sync(self, mock_app_config, mock_use_case_cls, mock_expiry_cls, worker):
        mock_app_config.INVENTORY_SYNC_ENABLED = False

        result = await worker.run_once()

        assert result.total_vehicles_checked == 0
        mock_use_case_cls.assert_not_called()
        mock_expiry_cls.assert_not_called()

    @patch("src.worker.inventory_sync.ExpireStalePayments")
    @patch("src.worker.inventory_sync.SyncInventory")
    @patch("src.worker.inventory_sync.ApplicationConfig")
    async def test_failure_raises(
        self, mock_app_config, mock_use_case_cls, mock_expiry_cls, worker, expiry_result
    ):
        mock_app_config.INVENTORY_SYNC_ENABLED = True
        mock_app_config.PENDING_PAYMENT_TTL_MINUTES = 30
        mock_expiry_cls.return_value = use_case_returning(Return.ok(expiry_result))
        mock_use_case_cls.return_value = use_case_returning(
            Return.err(Error(code="INVENTORY_SYNC_FAILED", message="db down"))
        )

        with pytest.raises(RuntimeError, match="db down"):
            await worker.run_once()

    @patch("src.worker.inventory_sync.ExpireStalePayments")
    @patch("src.worker.inventory_sync.SyncInventory")
    @patch("src.worker.inventory_sync.ApplicationConfig")
    async def test_expiry_failure_stops_the_pass(
        self, mock_app_config, mock_use_case_cls, mock_expiry_cls, worker
    ):
        mock_app_config.INVENTORY_SYNC_ENABLED = True
        mock_app_config.PENDING_PAYMENT_TTL_MINUTES = 30
        mock_expiry_cls.return_value = use_case_returning(
            Return.err(Error(code="EXPIRE_PAYMENTS_FAILED", message="Failed to list stale payments"))
        )

        with pytest.raises(RuntimeError, match="stale payments"):
            await worker.run_once()

        mock_use_case_cls.assert_not_called()

    async def test_shutdown_disposes_engine(self, worker):
        await worker.shutdown()

        worker.engine.dispose.assert_called_once()
