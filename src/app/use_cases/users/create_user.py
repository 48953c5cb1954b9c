"""CreateUser Use Case

Registers an admin, agency or customer with a role-specific profile.
"""

from pydantic import ValidationError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.user_repository import UserRepository
from src.domain.user import User, validate_profile
from .dtos import CreateUserCommandDTO, UserResponseDTO


def to_user_dto(user: User) -> UserResponseDTO:
    return UserResponseDTO(
        id=user.id,
        email=user.email,
        role=user.role.value,
        name=user.name,
        profile=user.profile,
        payment_customer_ref=user.payment_customer_ref,
        is_active=user.is_active,
        created_at=user.created_at,
    )


class CreateUser:
    """
    Use Case: Register a marketplace user

    Business Rules:
    1. Email is unique across all roles
    2. Profile must validate against the role's schema
    """

    def __init__(self, uow: UnitOfWork, user_repo: UserRepository):
        self.uow = uow
        self.user_repo = user_repo

    async def execute(self, command: CreateUserCommandDTO) -> Result[UserResponseDTO]:
        try:
            try:
                profile = validate_profile(command.role, command.profile)
            except ValidationError as e:
                return Return.err(
                    Error(
                        code="INVALID_INPUT",
                        message=f"Invalid {command.role.value} profile",
                        reason=str(e),
                    )
                )

            existing = await self.user_repo.get_by_email(command.email)
            if existing:
                return Return.err(
                    Error(
                        code="EMAIL_TAKEN",
                        message=f"Email {command.email} is already registered",
                    )
                )

            user = User(
                email=command.email,
                role=command.role,
                name=command.name,
                profile=profile,
                payment_customer_ref=command.payment_customer_ref,
            )
            created = await self.user_repo.create(user)
            await self.uow.commit()

            return Return.ok(to_user_dto(created))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_USER_FAILED",
                    message="Failed to create user",
                    reason=str(e),
                )
            )
