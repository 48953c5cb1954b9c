"""Vehicle rating aggregate

average_rating and total_reviews on the vehicle are a cache of the
approved reviews; every review change that can affect them calls
refresh_vehicle_rating in the same transaction.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from src.app.repositories.review_repository import ReviewRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.vehicle import Vehicle


async def refresh_vehicle_rating(
    vehicle_repo: VehicleRepository, review_repo: ReviewRepository, vehicle_id: int
) -> Optional[Vehicle]:
    vehicle = await vehicle_repo.get_by_id(vehicle_id, for_update=True)
    if vehicle is None:
        return None

    average, count = await review_repo.rating_summary(vehicle_id)
    vehicle.average_rating = Decimal(average or 0).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    vehicle.total_reviews = count
    return await vehicle_repo.update(vehicle)
