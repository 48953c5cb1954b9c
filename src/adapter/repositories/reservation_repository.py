"""SQLAlchemy implementation of ReservationRepository"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.reservation_repository import ReservationRepository
from src.domain.reservation import Reservation, ReservationStatus
from src.domain.vehicle import Vehicle


class SqlAlchemyReservationRepository(ReservationRepository):
    """
    SQLAlchemy implementation of ReservationRepository

    Overlap queries use half-open semantics:
    existing.start_date < end AND existing.end_date > start
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, reservation_id: int, for_update: bool = False) -> Optional[Reservation]:
        stmt = select(Reservation).where(Reservation.id == reservation_id)

        if for_update:
            # Locked reads must not be served from the identity map
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, reservation: Reservation) -> Reservation:
        self.session.add(reservation)
        await self.session.flush()
        await self.session.refresh(reservation)
        return reservation

    async def update(self, reservation: Reservation) -> Reservation:
        reservation.updated_at = datetime.utcnow()
        self.session.add(reservation)
        await self.session.flush()
        return reservation

    async def delete(self, reservation: Reservation) -> None:
        await self.session.delete(reservation)
        await self.session.flush()

    async def has_overlap(
        self,
        vehicle_id: int,
        start_date: datetime,
        end_date: datetime,
        statuses: Iterable[ReservationStatus],
    ) -> bool:
        stmt = (
            select(Reservation.id)
            .where(
                Reservation.vehicle_id == vehicle_id,
                Reservation.status.in_(list(statuses)),
                Reservation.start_date < end_date,
                Reservation.end_date > start_date,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def get_overlapping_vehicle_ids(
        self,
        start_date: datetime,
        end_date: datetime,
        statuses: Iterable[ReservationStatus],
    ) -> Set[int]:
        stmt = (
            select(Reservation.vehicle_id)
            .where(
                Reservation.status.in_(list(statuses)),
                Reservation.start_date < end_date,
                Reservation.end_date > start_date,
            )
            .distinct()
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def count_by_status_for_agency(self, agency_id: int) -> Dict[ReservationStatus, int]:
        stmt = (
            select(Reservation.status, func.count())
            .join(Vehicle, Vehicle.id == Reservation.vehicle_id)
            .where(Vehicle.agency_id == agency_id)
            .group_by(Reservation.status)
        )
        result = await self.session.execute(stmt)
        return {ReservationStatus(status): count for status, count in result.all()}

    async def sum_total_price_for_agency(
        self, agency_id: int, statuses: Iterable[ReservationStatus]
    ) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(Reservation.total_price), 0))
            .join(Vehicle, Vehicle.id == Reservation.vehicle_id)
            .where(
                Vehicle.agency_id == agency_id,
                Reservation.status.in_(list(statuses)),
            )
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar_one()))

    async def count_for_vehicle(self, vehicle_id: int) -> int:
        stmt = select(func.count()).select_from(Reservation).where(Reservation.vehicle_id == vehicle_id)
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Reservation))
        return result.scalar_one()

    async def sum_total_price(self, statuses: Iterable[ReservationStatus]) -> Decimal:
        stmt = select(func.coalesce(func.sum(Reservation.total_price), 0)).where(
            Reservation.status.in_(list(statuses))
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar_one()))

    async def list_starting_between(
        self, start_date: datetime, end_date: datetime, agency_id: Optional[int] = None
    ) -> List[Reservation]:
        stmt = select(Reservation).where(
            Reservation.start_date >= start_date,
            Reservation.start_date < end_date,
        )
        if agency_id is not None:
            stmt = stmt.join(Vehicle, Vehicle.id == Reservation.vehicle_id).where(
                Vehicle.agency_id == agency_id
            )
        result = await self.session.execute(stmt.order_by(Reservation.start_date, Reservation.id))
        return list(result.scalars().all())
