"""Reservation API Routes

FastAPI routes for the reservation lifecycle: booking, cancellation,
completion and contract generation.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.inventory_ledger import InventoryLedger
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.vehicle_locks import VehicleLocks
from src.app.use_cases.reservations import (
    CreateReservation,
    CancelReservation,
    CompleteReservation,
    GetReservation,
    GenerateContract,
    CreateReservationCommandDTO,
    GenerateContractCommandDTO,
    ReservationResponseDTO,
    ContractResponseDTO,
)
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.payment_repository import SqlAlchemyPaymentRepository
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.reservation_request import (
    CreateReservationRequestSchema,
    GenerateContractRequestSchema,
)
from src.depends import (
    get_session,
    get_payment_gateway,
    get_vehicle_locks,
    get_notification_service,
)
from src.api.error import ClientError

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post(
    "",
    response_model=ReservationResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Invalid interval",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_INPUT",
                            "message": "end_date must be after start_date"
                        }
                    }
                }
            }
        },
        402: {
            "description": "Payment declined",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "PAYMENT_DECLINED", "message": "Payment was declined"}}
                }
            }
        },
        409: {
            "description": "Vehicle already booked",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "RESERVATION_CONFLICT",
                            "message": "Vehicle 3 is already booked for the requested dates"
                        }
                    }
                }
            }
        },
        502: {
            "description": "Payment gateway unavailable after retries",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_FAILED",
                            "message": "Payment could not be processed"
                        }
                    }
                }
            }
        },
    }
)
async def create_reservation(
    request: CreateReservationRequestSchema,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    vehicle_locks: VehicleLocks = Depends(get_vehicle_locks),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Book a vehicle for [start_date, end_date) and charge the customer.

    The price is `price_per_day * ceil(days)`. The reservation is `confirmed`
    when the charge succeeds immediately and stays `pending` while the
    gateway processes it; a webhook settles it later. A failed or
    interrupted charge leaves no reservation behind. If the reservation is
    cancelled while its charge is in flight it stays cancelled and the
    capture is refunded.

    **Request body:**
    - `customer_id` (required): Booking customer
    - `vehicle_id` (required): Vehicle to book
    - `start_date`, `end_date` (required): ISO 8601 timestamps
    - `payment_method_id` (required): Gateway payment method

    **Returns:**
    - 201: Reservation created
    - 400: end_date is not after start_date
    - 402: Payment declined
    - 404: Customer or vehicle not found
    - 409: Vehicle already booked for an overlapping interval
    - 422: Vehicle in maintenance
    - 502: Payment gateway unavailable
    """
    vehicle_repo = SqlAlchemyVehicleRepository(session)
    reservation_repo = SqlAlchemyReservationRepository(session)

    use_case = CreateReservation(
        uow=SqlAlchemyUnitOfWork(session),
        user_repo=SqlAlchemyUserRepository(session),
        vehicle_repo=vehicle_repo,
        reservation_repo=reservation_repo,
        payment_repo=SqlAlchemyPaymentRepository(session),
        payment_gateway=payment_gateway,
        inventory_ledger=InventoryLedger(vehicle_repo, reservation_repo),
        vehicle_locks=vehicle_locks,
        currency=ApplicationConfig.PAYMENT_CURRENCY,
        notification_service=notification_service,
    )

    command = CreateReservationCommandDTO(**request.model_dump())
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{reservation_id}", response_model=ReservationResponseDTO)
async def get_reservation(reservation_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a reservation with its payment status.

    **Returns:**
    - 200: Reservation found
    - 404: Reservation not found
    """
    use_case = GetReservation(
        SqlAlchemyReservationRepository(session),
        SqlAlchemyPaymentRepository(session),
    )
    result = await use_case.execute(reservation_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{reservation_id}/cancel",
    response_model=ReservationResponseDTO,
    responses={
        410: {
            "description": "Reservation already cancelled",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ALREADY_CANCELLED",
                            "message": "Reservation 42 is already cancelled"
                        }
                    }
                }
            }
        },
    }
)
async def cancel_reservation(
    reservation_id: int,
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    notification_service: NotificationService = Depends(get_notification_service),
):
    """
    Cancel a pending or confirmed reservation.

    A completed payment is refunded. If the refund fails the reservation is
    still cancelled and the response carries a warning; operators are
    alerted to refund manually.

    **Returns:**
    - 200: Reservation cancelled (check `warnings`)
    - 404: Reservation not found
    - 410: Reservation already cancelled
    - 422: Reservation already completed
    """
    vehicle_repo = SqlAlchemyVehicleRepository(session)
    reservation_repo = SqlAlchemyReservationRepository(session)

    use_case = CancelReservation(
        uow=SqlAlchemyUnitOfWork(session),
        reservation_repo=reservation_repo,
        payment_repo=SqlAlchemyPaymentRepository(session),
        vehicle_repo=vehicle_repo,
        contract_repo=SqlAlchemyContractRepository(session),
        payment_gateway=payment_gateway,
        inventory_ledger=InventoryLedger(vehicle_repo, reservation_repo),
        notification_service=notification_service,
    )
    result = await use_case.execute(reservation_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{reservation_id}/complete", response_model=ReservationResponseDTO)
async def complete_reservation(reservation_id: int, session: AsyncSession = Depends(get_session)):
    """
    Mark a confirmed reservation as completed (vehicle returned).

    **Returns:**
    - 200: Reservation completed
    - 404: Reservation not found
    - 422: Reservation is not confirmed
    """
    vehicle_repo = SqlAlchemyVehicleRepository(session)
    reservation_repo = SqlAlchemyReservationRepository(session)

    use_case = CompleteReservation(
        uow=SqlAlchemyUnitOfWork(session),
        reservation_repo=reservation_repo,
        vehicle_repo=vehicle_repo,
        contract_repo=SqlAlchemyContractRepository(session),
        inventory_ledger=InventoryLedger(vehicle_repo, reservation_repo),
    )
    result = await use_case.execute(reservation_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{reservation_id}/contract",
    response_model=ContractResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def generate_contract(
    reservation_id: int,
    request: Optional[GenerateContractRequestSchema] = None,
    session: AsyncSession = Depends(get_session),
):
    """
    Generate the rental contract of a confirmed reservation.

    **Request body (optional):**
    - `terms`: Custom terms; defaults to a summary of the rental

    **Returns:**
    - 201: Contract created
    - 404: Reservation not found
    - 409: Reservation already has a contract
    - 422: Reservation is not confirmed
    """
    use_case = GenerateContract(
        uow=SqlAlchemyUnitOfWork(session),
        reservation_repo=SqlAlchemyReservationRepository(session),
        vehicle_repo=SqlAlchemyVehicleRepository(session),
        contract_repo=SqlAlchemyContractRepository(session),
    )
    command = GenerateContractCommandDTO(terms=request.terms if request else None)
    result = await use_case.execute(reservation_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
