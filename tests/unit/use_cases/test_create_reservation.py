"""Unit tests for CreateReservation use case

Tests cover:
- Successful booking charges and confirms
- Invalid interval rejected before touching storage
- Overlap conflict
- Declined and failed charges leave no reservation
- Processing charge stays pending
- Cancellation during the charge is never overwritten to confirmed
- Interrupted charges release the pending rows
"""

import asyncio
import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, call

from src.app.services.payment_gateway import (
    ChargeResult,
    ChargeStatus,
    GatewayError,
    PaymentDeclined,
    RefundResult,
)
from src.app.services.vehicle_locks import VehicleLocks
from src.app.use_cases.reservations import CreateReservation, CreateReservationCommandDTO
from src.domain.payment import PaymentStatus
from src.domain.reservation import ReservationStatus
from src.domain.user import User, UserRole
from src.domain.vehicle import Vehicle, VehicleStatus


START = datetime(2025, 7, 1, 10, 0)


@pytest.fixture
def customer():
    return User(
        id=12,
        email="jane@example.com",
        role=UserRole.CUSTOMER,
        name="Jane Doe",
        profile={"first_name": "Jane", "last_name": "Doe"},
        payment_customer_ref="cus_1",
    )


@pytest.fixture
def vehicle():
    return Vehicle(
        id=3,
        agency_id=7,
        brand="Toyota",
        model="Corolla",
        year=2022,
        color="white",
        price_per_day=Decimal("50.00"),
        plate_number="AB-123-CD",
        status=VehicleStatus.AVAILABLE,
    )


@pytest.fixture
def repos(customer, vehicle):
    user_repo = MagicMock()
    user_repo.get_by_id = AsyncMock(return_value=customer)

    vehicle_repo = MagicMock()
    vehicle_repo.get_by_id = AsyncMock(return_value=vehicle)

    created = {}

    def assign_id(entity_id):
        async def create(entity):
            entity.id = entity_id
            created[type(entity).__name__] = entity
            return entity
        return create

    reservation_repo = MagicMock()
    reservation_repo.has_overlap = AsyncMock(return_value=False)
    reservation_repo.create = AsyncMock(side_effect=assign_id(40))
    reservation_repo.update = AsyncMock(side_effect=lambda r: r)
    reservation_repo.delete = AsyncMock()
    reservation_repo.get_by_id = AsyncMock(side_effect=lambda *_, **__: created.get("Reservation"))

    payment_repo = MagicMock()
    payment_repo.create = AsyncMock(side_effect=assign_id(90))
    payment_repo.update = AsyncMock(side_effect=lambda p: p)
    payment_repo.get_by_id = AsyncMock(side_effect=lambda *_, **__: created.get("Payment"))

    return user_repo, vehicle_repo, reservation_repo, payment_repo


@pytest.fixture
def mock_gateway():
    return MagicMock()


@pytest.fixture
def mock_ledger():
    ledger = MagicMock()
    ledger.refresh_status = AsyncMock(return_value=True)
    return ledger


@pytest.fixture
def use_case(mock_uow, repos, mock_gateway, mock_ledger):
    user_repo, vehicle_repo, reservation_repo, payment_repo = repos
    return CreateReservation(
        uow=mock_uow,
        user_repo=user_repo,
        vehicle_repo=vehicle_repo,
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        payment_gateway=mock_gateway,
        inventory_ledger=mock_ledger,
        vehicle_locks=VehicleLocks(),
        currency="USD",
    )


def command(days=3, **overrides):
    data = dict(
        customer_id=12,
        vehicle_id=3,
        start_date=START,
        end_date=START + timedelta(days=days),
        payment_method_id="pm_card_visa",
    )
    data.update(overrides)
    return CreateReservationCommandDTO(**data)


@pytest.mark.asyncio
class TestCreateReservationSuccess:

    async def test_three_day_booking_is_charged_and_confirmed(
        self, use_case, repos, mock_gateway, mock_ledger, mock_uow, vehicle
    ):
        """
        Given: An available vehicle at 50.00 per day
        When: A customer books it for three days and the charge succeeds
        Then: Reservation is confirmed at 150.00, payment completed, projection refreshed
        """
        _, vehicle_repo, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(return_value=ChargeResult(success=True, transaction_ref="pi_1"))

        result = await use_case.execute(command())

        assert result.is_ok()
        response = result.value
        assert response.id == 40
        assert response.status == "confirmed"
        assert response.total_price == Decimal("150.00")
        assert response.payment_id == 90
        assert response.payment_status == "completed"

        assert vehicle_repo.get_by_id.call_args_list[0] == call(3, for_update=True)
        reservation_repo.get_by_id.assert_called_once_with(40, for_update=True)
        payment_repo.get_by_id.assert_called_once_with(90, for_update=True)
        charge_args = mock_gateway.charge.call_args
        assert charge_args.args[0] == "cus_1"
        assert charge_args.args[1] == Decimal("150.00")
        assert charge_args.kwargs["metadata"] == {"payment_id": "90", "reservation_id": "40"}

        payment = payment_repo.create.call_args.args[0]
        assert payment.reference_id == "40"
        assert payment.transaction_ref == "pi_1"
        assert charge_args.args[4] == payment.idempotency_key

        mock_ledger.refresh_status.assert_called_once_with(vehicle)
        assert mock_uow.commit.call_count == 2

    async def test_processing_charge_stays_pending(self, use_case, repos, mock_gateway, mock_ledger):
        _, _, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(
            return_value=ChargeResult(
                success=False, transaction_ref="pi_2", status=ChargeStatus.PROCESSING
            )
        )

        result = await use_case.execute(command())

        assert result.is_ok()
        assert result.value.status == "pending"
        assert result.value.payment_status == "pending"
        assert payment_repo.create.call_args.args[0].transaction_ref == "pi_2"
        mock_ledger.refresh_status.assert_not_called()


@pytest.mark.asyncio
class TestCreateReservationRejections:

    async def test_end_before_start_writes_nothing(self, use_case, repos, mock_gateway):
        user_repo, _, reservation_repo, payment_repo = repos

        result = await use_case.execute(command(days=0))

        assert result.is_err()
        assert result.error.code == "INVALID_INPUT"
        user_repo.get_by_id.assert_not_called()
        reservation_repo.create.assert_not_called()
        payment_repo.create.assert_not_called()

    async def test_unknown_customer(self, use_case, repos):
        repos[0].get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(command())

        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_agency_cannot_book(self, use_case, repos, customer):
        customer.role = UserRole.AGENCY

        result = await use_case.execute(command())

        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_unknown_vehicle(self, use_case, repos):
        repos[1].get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(command())

        assert result.error.code == "VEHICLE_NOT_FOUND"

    async def test_vehicle_in_maintenance(self, use_case, vehicle):
        vehicle.status = VehicleStatus.MAINTENANCE

        result = await use_case.execute(command())

        assert result.error.code == "INVALID_STATE"

    async def test_overlap_is_conflict(self, use_case, repos, mock_gateway):
        _, _, reservation_repo, payment_repo = repos
        reservation_repo.has_overlap = AsyncMock(return_value=True)
        mock_gateway.charge = AsyncMock()

        result = await use_case.execute(command())

        assert result.error.code == "RESERVATION_CONFLICT"
        payment_repo.create.assert_not_called()
        mock_gateway.charge.assert_not_called()


@pytest.mark.asyncio
class TestCreateReservationChargeFailures:

    async def test_declined_charge_deletes_reservation(
        self, use_case, repos, mock_gateway, mock_ledger
    ):
        """
        Given: The gateway declines the card
        When: A booking is attempted
        Then: PAYMENT_DECLINED, payment failed, reservation deleted, vehicle untouched
        """
        _, _, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(side_effect=PaymentDeclined("card_declined"))

        result = await use_case.execute(command())

        assert result.error.code == "PAYMENT_DECLINED"
        payment = payment_repo.create.call_args.args[0]
        assert payment.status == PaymentStatus.FAILED
        assert payment.failure_reason == "card_declined"
        reservation_repo.delete.assert_called_once()
        assert reservation_repo.delete.call_args.args[0].status == ReservationStatus.PENDING
        mock_ledger.refresh_status.assert_not_called()

    async def test_exhausted_gateway_is_payment_failed(self, use_case, repos, mock_gateway):
        _, _, reservation_repo, _ = repos
        mock_gateway.charge = AsyncMock(side_effect=GatewayError("service unavailable"))

        result = await use_case.execute(command())

        assert result.error.code == "PAYMENT_FAILED"
        reservation_repo.delete.assert_called_once()

    async def test_unexpected_error_rolls_back(self, use_case, repos, mock_uow):
        repos[2].has_overlap = AsyncMock(side_effect=RuntimeError("db down"))

        result = await use_case.execute(command())

        assert result.error.code == "CREATE_RESERVATION_FAILED"
        assert result.error.reason == "db down"
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestCreateReservationSettlementRaces:

    async def test_cancel_during_charge_is_refunded_not_confirmed(
        self, use_case, repos, mock_gateway, mock_ledger
    ):
        """
        Given: The reservation is cancelled while its charge is in flight
        When: The gateway then reports the capture
        Then: The reservation stays cancelled and the capture is refunded
        """
        _, _, reservation_repo, payment_repo = repos

        async def charge_then_cancel(*args, **kwargs):
            reservation = reservation_repo.create.call_args.args[0]
            reservation.status = ReservationStatus.CANCELLED
            return ChargeResult(success=True, transaction_ref="pi_1")

        mock_gateway.charge = AsyncMock(side_effect=charge_then_cancel)
        mock_gateway.refund = AsyncMock(return_value=RefundResult(success=True, refund_ref="re_1"))

        result = await use_case.execute(command())

        assert result.is_ok()
        assert result.value.status == "cancelled"
        assert result.value.payment_status == "refunded"
        mock_gateway.refund.assert_called_once_with("pi_1")
        payment = payment_repo.create.call_args.args[0]
        assert payment.refund_ref == "re_1"
        assert payment.refunded_amount == Decimal("150.00")
        mock_ledger.refresh_status.assert_not_called()

    async def test_failed_refund_after_cancel_warns_and_alerts(
        self, mock_uow, repos, mock_gateway, mock_ledger
    ):
        user_repo, vehicle_repo, reservation_repo, payment_repo = repos
        notifier = MagicMock()
        notifier.send_refund_failure_alert = AsyncMock(return_value=True)
        use_case = CreateReservation(
            uow=mock_uow,
            user_repo=user_repo,
            vehicle_repo=vehicle_repo,
            reservation_repo=reservation_repo,
            payment_repo=payment_repo,
            payment_gateway=mock_gateway,
            inventory_ledger=mock_ledger,
            vehicle_locks=VehicleLocks(),
            notification_service=notifier,
        )

        async def charge_then_cancel(*args, **kwargs):
            reservation_repo.create.call_args.args[0].status = ReservationStatus.CANCELLED
            return ChargeResult(success=True, transaction_ref="pi_1")

        mock_gateway.charge = AsyncMock(side_effect=charge_then_cancel)
        mock_gateway.refund = AsyncMock(side_effect=GatewayError("service unavailable"))

        result = await use_case.execute(command())

        assert result.value.status == "cancelled"
        assert result.value.payment_status == "completed"
        assert len(result.value.warnings) == 1
        notifier.send_refund_failure_alert.assert_called_once()

    async def test_webhook_confirmed_first_is_left_alone(
        self, use_case, repos, mock_gateway, mock_ledger
    ):
        """A success webhook that beat the charge response already settled both rows"""
        _, _, reservation_repo, payment_repo = repos

        async def charge_settled_by_webhook(*args, **kwargs):
            payment_repo.create.call_args.args[0].mark_completed("pi_1")
            reservation_repo.create.call_args.args[0].status = ReservationStatus.CONFIRMED
            return ChargeResult(success=True, transaction_ref="pi_1")

        mock_gateway.charge = AsyncMock(side_effect=charge_settled_by_webhook)
        mock_gateway.refund = AsyncMock()

        result = await use_case.execute(command())

        assert result.value.status == "confirmed"
        assert result.value.payment_status == "completed"
        mock_gateway.refund.assert_not_called()


@pytest.mark.asyncio
class TestCreateReservationInterruptedCharge:

    async def test_unexpected_charge_error_releases_pending_rows(
        self, use_case, repos, mock_gateway, mock_uow
    ):
        """
        Given: The gateway call dies with an error that is not a gateway error
        When: A booking is attempted
        Then: CREATE_RESERVATION_FAILED, reservation deleted, payment failed
        """
        _, _, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(side_effect=RuntimeError("connection reset by peer"))

        result = await use_case.execute(command())

        assert result.error.code == "CREATE_RESERVATION_FAILED"
        reservation_repo.delete.assert_called_once()
        assert payment_repo.create.call_args.args[0].status == PaymentStatus.FAILED
        assert mock_uow.commit.call_count == 2

    async def test_cancelled_request_releases_pending_rows(self, use_case, repos, mock_gateway):
        _, _, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await use_case.execute(command())

        reservation_repo.delete.assert_called_once()
        assert payment_repo.create.call_args.args[0].status == PaymentStatus.FAILED

    async def test_capture_then_storage_error_is_refunded(self, use_case, repos, mock_gateway):
        """
        Given: The charge is captured but reading the rows back fails
        When: The booking gives up
        Then: The reservation is dropped and the capture refunded
        """
        _, _, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(return_value=ChargeResult(success=True, transaction_ref="pi_1"))
        mock_gateway.refund = AsyncMock(return_value=RefundResult(success=True, refund_ref="re_1"))
        reservations = []

        async def flaky_get(reservation_id, for_update=False):
            reservations.append(reservation_id)
            if len(reservations) == 1:
                raise RuntimeError("lost connection")
            return reservation_repo.create.call_args.args[0]

        reservation_repo.get_by_id = AsyncMock(side_effect=flaky_get)

        result = await use_case.execute(command())

        assert result.error.code == "CREATE_RESERVATION_FAILED"
        reservation_repo.delete.assert_called_once()
        mock_gateway.refund.assert_called_once_with("pi_1")
        assert payment_repo.create.call_args.args[0].status == PaymentStatus.REFUNDED

    async def test_processing_then_error_keeps_transaction_ref(self, use_case, repos, mock_gateway):
        """A processing charge that is abandoned keeps its transaction_ref for the late webhook"""
        _, _, reservation_repo, payment_repo = repos
        mock_gateway.charge = AsyncMock(
            return_value=ChargeResult(
                success=False, transaction_ref="pi_3", status=ChargeStatus.PROCESSING
            )
        )
        calls = []

        async def flaky_get(payment_id, for_update=False):
            calls.append(payment_id)
            if len(calls) == 1:
                raise RuntimeError("lost connection")
            return payment_repo.create.call_args.args[0]

        payment_repo.get_by_id = AsyncMock(side_effect=flaky_get)

        result = await use_case.execute(command())

        assert result.error.code == "CREATE_RESERVATION_FAILED"
        payment = payment_repo.create.call_args.args[0]
        assert payment.status == PaymentStatus.FAILED
        assert payment.transaction_ref == "pi_3"
        reservation_repo.delete.assert_called_once()
