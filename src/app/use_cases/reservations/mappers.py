from typing import List, Optional
from src.domain.contract import Contract
from src.domain.payment import Payment
from src.domain.reservation import Reservation
from .dtos import ContractResponseDTO, ReservationResponseDTO


def to_reservation_dto(
    reservation: Reservation,
    payment: Optional[Payment] = None,
    warnings: Optional[List[str]] = None,
) -> ReservationResponseDTO:
    return ReservationResponseDTO(
        id=reservation.id,
        customer_id=reservation.customer_id,
        vehicle_id=reservation.vehicle_id,
        start_date=reservation.start_date,
        end_date=reservation.end_date,
        status=reservation.status.value,
        total_price=reservation.total_price,
        payment_id=reservation.payment_id,
        payment_status=payment.status.value if payment else None,
        created_at=reservation.created_at,
        updated_at=reservation.updated_at,
        warnings=warnings or [],
    )


def to_contract_dto(contract: Contract) -> ContractResponseDTO:
    return ContractResponseDTO(
        id=contract.id,
        reservation_id=contract.reservation_id,
        customer_id=contract.customer_id,
        vehicle_id=contract.vehicle_id,
        start_date=contract.start_date,
        end_date=contract.end_date,
        status=contract.status.value,
        terms=contract.terms,
        created_at=contract.created_at,
    )
