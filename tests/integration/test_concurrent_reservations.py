"""Integration tests for concurrent bookings of one vehicle"""

import asyncio
import pytest
from datetime import datetime
from decimal import Decimal
from sqlmodel import select

from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.inventory_ledger import InventoryLedger
from src.app.use_cases.reservations import CreateReservation, CreateReservationCommandDTO
from src.domain.reservation import Reservation, ReservationStatus
from src.domain.user import User, UserRole
from src.domain.vehicle import Vehicle


def build_use_case(session, payment_gateway, vehicle_locks):
    vehicle_repo = SqlAlchemyVehicleRepository(session)
    reservation_repo = SqlAlchemyReservationRepository(session)
    return CreateReservation(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        vehicle_repo=vehicle_repo,
        reservation_repo=reservation_repo,
        payment_repo=SqlAlchemyPaymentRepository(session),
        payment_gateway=payment_gateway,
        inventory_ledger=InventoryLedger(vehicle_repo, reservation_repo),
        vehicle_locks=vehicle_locks,
    )


class TestConcurrentReservations:

    @pytest.mark.asyncio
    async def test_overlapping_requests_book_once(
        self, db_session, session_factory, payment_gateway, vehicle_locks
    ):
        """
        Given one vehicle and two sessions racing for overlapping dates
        When both reservations are created concurrently
        Then exactly one succeeds and the other gets RESERVATION_CONFLICT
        """
        agency = User(
            email="fleet@example.com",
            role=UserRole.AGENCY,
            name="Fleet",
            profile={"name": "Fleet", "address": "1 Dock St"},
        )
        customer = User(
            email="jane@example.com",
            role=UserRole.CUSTOMER,
            name="Jane",
            profile={"first_name": "Jane", "last_name": "Doe"},
        )
        db_session.add(agency)
        db_session.add(customer)
        await db_session.commit()
        vehicle = Vehicle(
            agency_id=agency.id,
            brand="Toyota",
            model="Corolla",
            year=2022,
            color="white",
            price_per_day=Decimal("50.00"),
            plate_number="AB-123-CD",
        )
        db_session.add(vehicle)
        await db_session.commit()

        first_command = CreateReservationCommandDTO(
            customer_id=customer.id,
            vehicle_id=vehicle.id,
            start_date=datetime(2030, 7, 1, 10),
            end_date=datetime(2030, 7, 4, 10),
            payment_method_id="pm_card_visa",
        )
        second_command = first_command.model_copy(
            update={"start_date": datetime(2030, 7, 3, 10), "end_date": datetime(2030, 7, 6, 10)}
        )

        async def book(command):
            async with session_factory() as session:
                return await build_use_case(session, payment_gateway, vehicle_locks).execute(command)

        results = await asyncio.gather(book(first_command), book(second_command))

        succeeded = [r for r in results if r.is_ok()]
        failed = [r for r in results if r.is_err()]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert failed[0].error.code == "RESERVATION_CONFLICT"
        assert len(payment_gateway.charges) == 1

        async with session_factory() as session:
            rows = (await session.exec(select(Reservation))).all()
        assert [r.status for r in rows] == [ReservationStatus.CONFIRMED]

    @pytest.mark.asyncio
    async def test_concurrent_http_bookings(self, client, customer, vehicle, payment_gateway):
        payload = {
            "customer_id": customer["id"],
            "vehicle_id": vehicle["id"],
            "start_date": "2030-07-01T10:00:00",
            "end_date": "2030-07-04T10:00:00",
            "payment_method_id": "pm_card_visa",
        }

        responses = await asyncio.gather(
            client.post("/reservations", json=payload),
            client.post("/reservations", json=payload),
        )

        assert sorted(r.status_code for r in responses) == [201, 409]
