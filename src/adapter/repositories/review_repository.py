"""SQLAlchemy implementation of ReviewRepository"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.review_repository import ReviewRepository
from src.domain.review import Review, ReviewStatus
from src.domain.vehicle import Vehicle


def _to_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


class SqlAlchemyReviewRepository(ReviewRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, review_id: int) -> Optional[Review]:
        stmt = select(Review).where(Review.id == review_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_reservation_id(self, reservation_id: int) -> Optional[Review]:
        stmt = select(Review).where(Review.reservation_id == reservation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, review: Review) -> Review:
        self.session.add(review)
        await self.session.flush()
        await self.session.refresh(review)
        return review

    async def update(self, review: Review) -> Review:
        review.updated_at = datetime.utcnow()
        self.session.add(review)
        await self.session.flush()
        return review

    async def delete(self, review: Review) -> None:
        await self.session.delete(review)
        await self.session.flush()

    async def list_approved_for_vehicle(
        self, vehicle_id: int, offset: int, limit: int
    ) -> Tuple[List[Review], int]:
        conditions = (Review.vehicle_id == vehicle_id, Review.status == ReviewStatus.APPROVED)

        count_stmt = select(func.count()).select_from(Review).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Review)
            .where(*conditions)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def rating_summary(self, vehicle_id: int) -> Tuple[Optional[Decimal], int]:
        stmt = select(func.avg(Review.rating), func.count(Review.id)).where(
            Review.vehicle_id == vehicle_id,
            Review.status == ReviewStatus.APPROVED,
        )
        average, count = (await self.session.execute(stmt)).one()
        return _to_decimal(average), count

    async def average_rating(self, agency_id: Optional[int] = None) -> Optional[Decimal]:
        stmt = select(func.avg(Review.rating)).where(Review.status == ReviewStatus.APPROVED)
        if agency_id is not None:
            stmt = stmt.join(Vehicle, Vehicle.id == Review.vehicle_id).where(
                Vehicle.agency_id == agency_id
            )
        result = await self.session.execute(stmt)
        return _to_decimal(result.scalar_one())
