"""Inventory Sync Background Worker

Periodically expires pending payments the gateway never answered, then
recomputes every vehicle's status projection so that vehicles whose
reservation window has started show as reserved, and vehicles whose window
has ended return to available.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.subscription_repository import SqlAlchemySubscriptionRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.use_cases.inventory import SyncInventory, InventorySyncResultDTO
from src.app.use_cases.payments import ExpireStalePayments

logger = logging.getLogger(__name__)


class InventorySyncWorker:
    """
    Background worker for the vehicle status projection

    Usage:
        # Run once
        worker = InventorySyncWorker()
        result = await worker.run_once()

        # Run continuously
        worker = InventorySyncWorker()
        await worker.run_forever(interval_seconds=3600)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("InventorySyncWorker initialized")

    async def run_once(self, as_of: Optional[datetime] = None) -> InventorySyncResultDTO:
        """
        Run one sync pass

        Args:
            as_of: Reference time (defaults to now)

        Returns:
            InventorySyncResultDTO with the pass summary
        """
        sync_time = as_of or datetime.utcnow()

        if not ApplicationConfig.INVENTORY_SYNC_ENABLED:
            logger.info("Inventory sync is disabled, skipping")
            return InventorySyncResultDTO(
                total_vehicles_checked=0,
                vehicles_updated=0,
                sync_time=sync_time,
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            vehicle_repo = SqlAlchemyVehicleRepository(session)
            reservation_repo = SqlAlchemyReservationRepository(session)
            uow = SqlAlchemyUnitOfWork(session)
            inventory_ledger = InventoryLedger(vehicle_repo, reservation_repo)

            # Expire first so released holds show up in the refreshed statuses
            expiry = ExpireStalePayments(
                uow=uow,
                payment_repo=SqlAlchemyPaymentRepository(session),
                reservation_repo=reservation_repo,
                subscription_repo=SqlAlchemySubscriptionRepository(session),
                vehicle_repo=vehicle_repo,
                inventory_ledger=inventory_ledger,
                ttl_minutes=int(ApplicationConfig.PENDING_PAYMENT_TTL_MINUTES),
            )
            expiry_result = await expiry.execute(sync_time)

            if expiry_result.is_err():
                logger.error(f"Stale payment expiry failed: {expiry_result.error.message}")
                raise RuntimeError(f"Stale payment expiry failed: {expiry_result.error.message}")

            use_case = SyncInventory(
                uow=uow,
                vehicle_repo=vehicle_repo,
                inventory_ledger=inventory_ledger,
            )

            result = await use_case.execute(sync_time)

            if result.is_err():
                logger.error(f"Inventory sync failed: {result.error.message}")
                raise RuntimeError(f"Inventory sync failed: {result.error.message}")

            return result.value.model_copy(
                update={"payments_expired": expiry_result.value.payments_expired}
            )

    async def run_forever(self, interval_seconds: int = 3600):
        """
        Run sync continuously at specified interval

        Args:
            interval_seconds: Seconds between runs (default: 1 hour)
        """
        logger.info(f"Starting continuous inventory sync with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Inventory sync cycle complete. "
                    f"Checked {result.total_vehicles_checked} vehicles, "
                    f"updated {result.vehicles_updated}, "
                    f"expired {result.payments_expired} stale payments "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Inventory sync cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("InventorySyncWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.inventory_sync --once

        # Run continuously (default: INVENTORY_SYNC_INTERVAL_SECONDS)
        python -m src.worker.inventory_sync

        # Run continuously with custom interval (in seconds)
        python -m src.worker.inventory_sync --interval 600
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Inventory Sync Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=int(ApplicationConfig.INVENTORY_SYNC_INTERVAL_SECONDS),
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = InventorySyncWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Inventory sync complete:")
            print(f"  Vehicles checked: {result.total_vehicles_checked}")
            print(f"  Vehicles updated: {result.vehicles_updated}")
            print(f"  Stale payments expired: {result.payments_expired}")
            print(f"  Execution time: {result.execution_time_ms}ms")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
