"""Unit tests for CompleteReservation and GenerateContract use cases"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.reservations import (
    CompleteReservation,
    GenerateContract,
    GenerateContractCommandDTO,
)
from src.app.use_cases.reservations.generate_contract import default_terms
from src.domain.contract import Contract, ContractStatus
from src.domain.reservation import Reservation, ReservationStatus


START = datetime(2025, 7, 1, 10, 0)
END = START + timedelta(days=3)


@pytest.fixture
def reservation():
    return Reservation(
        id=40,
        customer_id=12,
        vehicle_id=3,
        start_date=START,
        end_date=END,
        status=ReservationStatus.CONFIRMED,
        total_price=Decimal("150.00"),
    )


@pytest.fixture
def reservation_repo(reservation):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=reservation)
    repo.update = AsyncMock(side_effect=lambda r: r)
    return repo


@pytest.fixture
def vehicle_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=MagicMock(id=3, brand="Toyota", model="Corolla"))
    return repo


@pytest.fixture
def contract_repo():
    repo = MagicMock()
    repo.get_by_reservation_id = AsyncMock(return_value=None)

    async def create(contract):
        contract.id = 5
        return contract

    repo.create = AsyncMock(side_effect=create)
    repo.update = AsyncMock(side_effect=lambda c: c)
    return repo


@pytest.fixture
def generate(mock_uow, reservation_repo, vehicle_repo, contract_repo):
    return GenerateContract(
        uow=mock_uow,
        reservation_repo=reservation_repo,
        vehicle_repo=vehicle_repo,
        contract_repo=contract_repo,
    )


@pytest.mark.asyncio
class TestGenerateContract:

    async def test_confirmed_reservation_gets_default_terms(self, generate, mock_uow):
        result = await generate.execute(40)

        assert result.is_ok()
        assert result.value.id == 5
        assert result.value.status == "active"
        assert result.value.terms == default_terms("Toyota", "Corolla", START, END)
        assert "Toyota Corolla" in result.value.terms
        mock_uow.commit.assert_called_once()

    async def test_custom_terms(self, generate, vehicle_repo):
        result = await generate.execute(40, GenerateContractCommandDTO(terms="No smoking."))

        assert result.value.terms == "No smoking."
        vehicle_repo.get_by_id.assert_not_called()

    @pytest.mark.parametrize(
        "status", [ReservationStatus.PENDING, ReservationStatus.CANCELLED, ReservationStatus.COMPLETED]
    )
    async def test_only_confirmed(self, generate, reservation, status):
        reservation.status = status

        result = await generate.execute(40)

        assert result.error.code == "INVALID_STATE"

    async def test_existing_contract_conflicts(self, generate, contract_repo):
        contract_repo.get_by_reservation_id = AsyncMock(return_value=MagicMock(id=1))

        result = await generate.execute(40)

        assert result.error.code == "CONTRACT_ALREADY_EXISTS"
        contract_repo.create.assert_not_called()


@pytest.mark.asyncio
class TestCompleteReservation:

    @pytest.fixture
    def complete(self, mock_uow, reservation_repo, vehicle_repo, contract_repo):
        ledger = MagicMock()
        ledger.refresh_status = AsyncMock(return_value=True)
        return CompleteReservation(
            uow=mock_uow,
            reservation_repo=reservation_repo,
            vehicle_repo=vehicle_repo,
            contract_repo=contract_repo,
            inventory_ledger=ledger,
        )

    async def test_confirmed_becomes_completed(self, complete, contract_repo):
        contract = Contract(
            id=5, reservation_id=40, customer_id=12, vehicle_id=3,
            start_date=START, end_date=END, status=ContractStatus.ACTIVE,
        )
        contract_repo.get_by_reservation_id = AsyncMock(return_value=contract)

        result = await complete.execute(40)

        assert result.value.status == "completed"
        assert contract.status == ContractStatus.COMPLETED

    async def test_pending_cannot_complete(self, complete, reservation):
        reservation.status = ReservationStatus.PENDING

        result = await complete.execute(40)

        assert result.error.code == "INVALID_STATE"
