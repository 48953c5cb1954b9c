"""GetReservation Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.reservation_repository import ReservationRepository
from .dtos import ReservationResponseDTO
from .mappers import to_reservation_dto


class GetReservation:

    def __init__(self, reservation_repo: ReservationRepository, payment_repo: PaymentRepository):
        self.reservation_repo = reservation_repo
        self.payment_repo = payment_repo

    async def execute(self, reservation_id: int) -> Result[ReservationResponseDTO]:
        try:
            reservation = await self.reservation_repo.get_by_id(reservation_id)
            if not reservation:
                return Return.err(
                    Error(
                        code="RESERVATION_NOT_FOUND",
                        message=f"Reservation {reservation_id} not found",
                    )
                )

            payment = None
            if reservation.payment_id is not None:
                payment = await self.payment_repo.get_by_id(reservation.payment_id)

            return Return.ok(to_reservation_dto(reservation, payment))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_RESERVATION_FAILED",
                    message="Failed to retrieve reservation",
                    reason=str(e),
                )
            )
