"""Vehicle API Routes

FastAPI routes for fleet management and availability queries.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.services.inventory_ledger import InventoryLedger
from src.app.use_cases.inventory import (
    RegisterVehicle,
    GetVehicle,
    CheckAvailability,
    ListAvailableVehicles,
    MarkMaintenance,
    MarkAvailable,
    ListVehicles,
    UpdateVehicle,
    DeleteVehicle,
    RegisterVehicleCommandDTO,
    UpdateVehicleCommandDTO,
    VehicleResponseDTO,
    VehicleListResponseDTO,
    AvailabilityResponseDTO,
    AvailableVehiclesResponseDTO,
)
from src.adapter.repositories.reservation_repository import SqlAlchemyReservationRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.common import to_naive_utc
from src.api.schemas.vehicle_request import RegisterVehicleRequestSchema, UpdateVehicleRequestSchema
from src.domain.vehicle import VehicleStatus
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


def _ledger(session: AsyncSession) -> InventoryLedger:
    return InventoryLedger(
        SqlAlchemyVehicleRepository(session),
        SqlAlchemyReservationRepository(session),
    )


@router.post(
    "",
    response_model=VehicleResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Agency not found",
            "content": {
                "application/json": {
                    "example": {"error": {"code": "AGENCY_NOT_FOUND", "message": "Agency 7 not found"}}
                }
            }
        },
        409: {
            "description": "Plate number already registered",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PLATE_NUMBER_TAKEN",
                            "message": "Plate number AB-123-CD is already registered"
                        }
                    }
                }
            }
        },
    }
)
async def register_vehicle(
    request: RegisterVehicleRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Add a vehicle to an agency's fleet.

    **Request body:**
    - `agency_id` (required): Owning agency
    - `brand`, `model`, `year`, `color` (required)
    - `price_per_day` (required): Daily price (must be > 0)
    - `plate_number` (required): Unique registration plate
    - `image_urls` (optional): Stored image references

    **Returns:**
    - 201: Vehicle registered with status `available`
    - 404: Agency not found
    - 409: Plate number already registered
    """
    uow = SqlAlchemyUnitOfWork(session)
    vehicle_repo = SqlAlchemyVehicleRepository(session)
    user_repo = SqlAlchemyUserRepository(session)

    command = RegisterVehicleCommandDTO(**request.model_dump())

    result = await RegisterVehicle(uow, vehicle_repo, user_repo).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("", response_model=VehicleListResponseDTO)
async def list_vehicles(
    agency_id: Optional[int] = Query(default=None, description="Only this agency's fleet"),
    vehicle_status: Optional[VehicleStatus] = Query(
        default=None, alias="status", description="Only vehicles in this status"
    ),
    session: AsyncSession = Depends(get_session)
):
    """
    List the fleet, optionally filtered by agency and status.

    **Returns:**
    - 200: Vehicles ordered by ID
    """
    result = await ListVehicles(SqlAlchemyVehicleRepository(session)).execute(agency_id, vehicle_status)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/available", response_model=AvailableVehiclesResponseDTO)
async def list_available_vehicles(
    start_date: datetime = Query(..., description="Interval start (inclusive)"),
    end_date: datetime = Query(..., description="Interval end (exclusive)"),
    session: AsyncSession = Depends(get_session)
):
    """
    List vehicles that can be booked for [start_date, end_date).

    A vehicle is listed when it is not in maintenance and no pending or
    confirmed reservation overlaps the interval. Touching intervals do not
    overlap.

    **Returns:**
    - 200: Available vehicles
    - 400: end_date is not after start_date
    """
    result = await ListAvailableVehicles(_ledger(session)).execute(
        to_naive_utc(start_date), to_naive_utc(end_date)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{vehicle_id}", response_model=VehicleResponseDTO)
async def get_vehicle(vehicle_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a vehicle by ID.

    **Returns:**
    - 200: Vehicle found
    - 404: Vehicle not found
    """
    result = await GetVehicle(SqlAlchemyVehicleRepository(session)).execute(vehicle_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{vehicle_id}/availability", response_model=AvailabilityResponseDTO)
async def check_availability(
    vehicle_id: int,
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    session: AsyncSession = Depends(get_session)
):
    """
    Check whether one vehicle can be booked for [start_date, end_date).

    **Returns:**
    - 200: Availability answer
    - 400: end_date is not after start_date
    - 404: Vehicle not found
    """
    use_case = CheckAvailability(SqlAlchemyVehicleRepository(session), _ledger(session))
    result = await use_case.execute(vehicle_id, to_naive_utc(start_date), to_naive_utc(end_date))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{vehicle_id}/maintenance", response_model=VehicleResponseDTO)
async def mark_maintenance(vehicle_id: int, session: AsyncSession = Depends(get_session)):
    """
    Take a vehicle out of service.

    Maintenance overrides the reservation-derived status until cleared.

    **Returns:**
    - 200: Vehicle now in maintenance
    - 404: Vehicle not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = MarkMaintenance(uow, SqlAlchemyVehicleRepository(session), _ledger(session))
    result = await use_case.execute(vehicle_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{vehicle_id}/available", response_model=VehicleResponseDTO)
async def mark_available(vehicle_id: int, session: AsyncSession = Depends(get_session)):
    """
    Return a vehicle from maintenance.

    The resulting status is `reserved` when a confirmed reservation covers
    today, `available` otherwise.

    **Returns:**
    - 200: Vehicle back in service
    - 404: Vehicle not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = MarkAvailable(uow, SqlAlchemyVehicleRepository(session), _ledger(session))
    result = await use_case.execute(vehicle_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.patch("/{vehicle_id}", response_model=VehicleResponseDTO)
async def update_vehicle(
    vehicle_id: int,
    request: UpdateVehicleRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Edit a vehicle's listing.

    Status is not editable here; use the maintenance endpoints.

    **Returns:**
    - 200: Updated vehicle
    - 404: Vehicle not found
    - 409: Plate number already registered
    """
    command = UpdateVehicleCommandDTO(**request.model_dump(exclude_none=True))
    use_case = UpdateVehicle(SqlAlchemyUnitOfWork(session), SqlAlchemyVehicleRepository(session))
    result = await use_case.execute(vehicle_id, command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(vehicle_id: int, session: AsyncSession = Depends(get_session)):
    """
    Delete a vehicle that has never been reserved.

    **Returns:**
    - 204: Vehicle deleted
    - 404: Vehicle not found
    - 409: Vehicle has reservations
    """
    use_case = DeleteVehicle(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyVehicleRepository(session),
        SqlAlchemyReservationRepository(session),
    )
    result = await use_case.execute(vehicle_id)

    if result.is_err():
        raise ClientError(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
