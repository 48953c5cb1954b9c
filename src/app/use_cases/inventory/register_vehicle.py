"""RegisterVehicle Use Case

Adds a vehicle to an agency's fleet.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from src.domain.user import UserRole
from src.domain.vehicle import Vehicle, VehicleStatus
from .dtos import RegisterVehicleCommandDTO, VehicleResponseDTO


def to_vehicle_dto(vehicle: Vehicle) -> VehicleResponseDTO:
    return VehicleResponseDTO(
        id=vehicle.id,
        agency_id=vehicle.agency_id,
        brand=vehicle.brand,
        model=vehicle.model,
        year=vehicle.year,
        color=vehicle.color,
        price_per_day=vehicle.price_per_day,
        plate_number=vehicle.plate_number,
        status=vehicle.status.value,
        image_urls=list(vehicle.image_urls or []),
        average_rating=vehicle.average_rating,
        total_reviews=vehicle.total_reviews,
        created_at=vehicle.created_at,
        updated_at=vehicle.updated_at,
    )


class RegisterVehicle:
    """
    Use Case: Register a vehicle

    Business Rules:
    1. Owner must be an existing user with role agency
    2. Plate number is unique
    3. New vehicles start available
    """

    def __init__(
        self,
        uow: UnitOfWork,
        vehicle_repo: VehicleRepository,
        user_repo: UserRepository,
    ):
        self.uow = uow
        self.vehicle_repo = vehicle_repo
        self.user_repo = user_repo

    async def execute(self, command: RegisterVehicleCommandDTO) -> Result[VehicleResponseDTO]:
        try:
            agency = await self.user_repo.get_by_id(command.agency_id)
            if not agency or agency.role != UserRole.AGENCY:
                return Return.err(
                    Error(
                        code="AGENCY_NOT_FOUND",
                        message=f"Agency {command.agency_id} not found",
                    )
                )

            existing = await self.vehicle_repo.get_by_plate_number(command.plate_number)
            if existing:
                return Return.err(
                    Error(
                        code="PLATE_NUMBER_TAKEN",
                        message=f"Plate number {command.plate_number} is already registered",
                    )
                )

            vehicle = Vehicle(
                agency_id=command.agency_id,
                brand=command.brand,
                model=command.model,
                year=command.year,
                color=command.color,
                price_per_day=command.price_per_day,
                plate_number=command.plate_number,
                status=VehicleStatus.AVAILABLE,
                image_urls=command.image_urls,
            )
            created = await self.vehicle_repo.create(vehicle)
            await self.uow.commit()

            return Return.ok(to_vehicle_dto(created))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REGISTER_VEHICLE_FAILED",
                    message="Failed to register vehicle",
                    reason=str(e),
                )
            )
