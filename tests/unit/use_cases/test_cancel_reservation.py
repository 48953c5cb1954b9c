"""Unit tests for CancelReservation use case

Tests cover:
- Cancelling a paid reservation refunds it and terminates the contract
- Refund failure is a warning, not an error
- The refund runs only after the cancellation is committed
- Second cancel and completed reservations are rejected
"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.services.payment_gateway import GatewayError, RefundResult
from src.app.use_cases.reservations import CancelReservation
from src.domain.contract import Contract, ContractStatus
from src.domain.payment import Payment, PaymentReferenceType, PaymentStatus
from src.domain.reservation import Reservation, ReservationStatus


START = datetime(2025, 7, 1, 10, 0)


@pytest.fixture
def reservation():
    return Reservation(
        id=40,
        customer_id=12,
        vehicle_id=3,
        start_date=START,
        end_date=START + timedelta(days=3),
        status=ReservationStatus.CONFIRMED,
        total_price=Decimal("150.00"),
        payment_id=90,
    )


@pytest.fixture
def payment():
    return Payment(
        id=90,
        amount=Decimal("150.00"),
        status=PaymentStatus.COMPLETED,
        reference_type=PaymentReferenceType.RESERVATION,
        reference_id="40",
        idempotency_key="key-1",
        transaction_ref="pi_1",
    )


@pytest.fixture
def contract():
    return Contract(
        id=5,
        reservation_id=40,
        customer_id=12,
        vehicle_id=3,
        start_date=START,
        end_date=START + timedelta(days=3),
        status=ContractStatus.ACTIVE,
    )


@pytest.fixture
def reservation_repo(reservation):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=reservation)
    repo.update = AsyncMock(side_effect=lambda r: r)
    return repo


@pytest.fixture
def payment_repo(payment):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=payment)
    repo.update = AsyncMock(side_effect=lambda p: p)
    return repo


@pytest.fixture
def contract_repo(contract):
    repo = MagicMock()
    repo.get_by_reservation_id = AsyncMock(return_value=contract)
    repo.update = AsyncMock(side_effect=lambda c: c)
    return repo


@pytest.fixture
def vehicle_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=MagicMock(id=3))
    return repo


@pytest.fixture
def mock_gateway():
    return MagicMock()


@pytest.fixture
def mock_notifier():
    notifier = MagicMock()
    notifier.send_refund_failure_alert = AsyncMock(return_value=True)
    return notifier


@pytest.fixture
def mock_ledger():
    ledger = MagicMock()
    ledger.refresh_status = AsyncMock(return_value=True)
    return ledger


@pytest.fixture
def use_case(
    mock_uow, reservation_repo, payment_repo, vehicle_repo, contract_repo,
    mock_gateway, mock_ledger, mock_notifier,
):
    return CancelReservation(
        uow=mock_uow,
        reservation_repo=reservation_repo,
        payment_repo=payment_repo,
        vehicle_repo=vehicle_repo,
        contract_repo=contract_repo,
        payment_gateway=mock_gateway,
        inventory_ledger=mock_ledger,
        notification_service=mock_notifier,
    )


@pytest.mark.asyncio
class TestCancelReservation:

    async def test_cancel_refunds_and_terminates_contract(
        self, use_case, mock_gateway, payment, contract, mock_ledger, mock_uow
    ):
        mock_gateway.refund = AsyncMock(return_value=RefundResult(success=True, refund_ref="re_1"))

        result = await use_case.execute(40)

        assert result.is_ok()
        assert result.value.status == "cancelled"
        assert result.value.payment_status == "refunded"
        assert result.value.warnings == []
        mock_gateway.refund.assert_called_once_with("pi_1")
        assert payment.refund_ref == "re_1"
        assert payment.refunded_amount == Decimal("150.00")
        assert contract.status == ContractStatus.TERMINATED
        mock_ledger.refresh_status.assert_called_once()
        assert mock_uow.commit.call_count == 2

    async def test_refund_runs_after_cancellation_commit(
        self, use_case, mock_gateway, mock_uow, reservation, payment_repo
    ):
        """
        Given: A confirmed, paid reservation
        When: It is cancelled
        Then: The cancellation is committed before the gateway is asked for
              the refund, and the refund is recorded on a freshly locked row
        """
        order = []

        async def commit():
            order.append(("commit", reservation.status))

        async def refund(transaction_ref):
            order.append(("refund", reservation.status))
            return RefundResult(success=True, refund_ref="re_1")

        mock_uow.commit = AsyncMock(side_effect=commit)
        mock_gateway.refund = AsyncMock(side_effect=refund)

        await use_case.execute(40)

        assert order == [
            ("commit", ReservationStatus.CANCELLED),
            ("refund", ReservationStatus.CANCELLED),
            ("commit", ReservationStatus.CANCELLED),
        ]
        assert payment_repo.get_by_id.call_args_list[-1].kwargs == {"for_update": True}

    async def test_refund_settled_elsewhere_is_not_recorded_twice(
        self, use_case, mock_gateway, payment, payment_repo
    ):
        """A payment refunded by another request while the gateway call ran is left alone"""

        async def refund(transaction_ref):
            payment.status = PaymentStatus.REFUNDED
            payment.refund_ref = "re_other"
            return RefundResult(success=True, refund_ref="re_1")

        mock_gateway.refund = AsyncMock(side_effect=refund)

        result = await use_case.execute(40)

        assert result.value.payment_status == "refunded"
        assert payment.refund_ref == "re_other"

    async def test_refund_failure_still_cancels_with_warning(
        self, use_case, mock_gateway, payment, mock_notifier
    ):
        """
        Given: The gateway is down when refunding
        When: The reservation is cancelled
        Then: It is cancelled anyway, the payment stays completed, a warning
              is returned and operators are alerted
        """
        mock_gateway.refund = AsyncMock(side_effect=GatewayError("service unavailable"))

        result = await use_case.execute(40)

        assert result.is_ok()
        assert result.value.status == "cancelled"
        assert payment.status == PaymentStatus.COMPLETED
        assert len(result.value.warnings) == 1
        assert "service unavailable" in result.value.warnings[0]
        mock_notifier.send_refund_failure_alert.assert_called_once_with(payment, "service unavailable")

    async def test_unpaid_pending_reservation_skips_refund(
        self, use_case, reservation, payment, mock_gateway
    ):
        reservation.status = ReservationStatus.PENDING
        payment.status = PaymentStatus.PENDING
        mock_gateway.refund = AsyncMock()

        result = await use_case.execute(40)

        assert result.value.status == "cancelled"
        mock_gateway.refund.assert_not_called()

    async def test_second_cancel_is_already_cancelled(self, use_case, reservation, mock_uow):
        reservation.status = ReservationStatus.CANCELLED

        result = await use_case.execute(40)

        assert result.error.code == "ALREADY_CANCELLED"
        mock_uow.commit.assert_not_called()

    async def test_completed_cannot_be_cancelled(self, use_case, reservation):
        reservation.status = ReservationStatus.COMPLETED

        result = await use_case.execute(40)

        assert result.error.code == "INVALID_STATE"

    async def test_not_found(self, use_case, reservation_repo):
        reservation_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(404)

        assert result.error.code == "RESERVATION_NOT_FOUND"
