"""User API Routes

FastAPI routes for registering and reading marketplace users.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.use_cases.users import CreateUser, GetUser, CreateUserCommandDTO, UserResponseDTO
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.schemas.user_request import CreateUserRequestSchema
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Email already registered",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "EMAIL_TAKEN",
                            "message": "Email jane@example.com is already registered"
                        }
                    }
                }
            }
        },
    }
)
async def create_user(
    request: CreateUserRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Register an admin, agency or customer.

    The `profile` object is validated against the role:
    - agency: `name`, `address`, optional `logo`, `is_verified`
    - customer: `first_name`, `last_name`, optional `address`
    - admin: optional `permissions`

    **Returns:**
    - 201: User created
    - 400: Profile does not match the role
    - 409: Email already registered
    """
    uow = SqlAlchemyUnitOfWork(session)
    user_repo = SqlAlchemyUserRepository(session)

    command = CreateUserCommandDTO(
        email=request.email,
        role=request.role,
        name=request.name,
        profile=request.profile,
        payment_customer_ref=request.payment_customer_ref,
    )

    result = await CreateUser(uow, user_repo).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{user_id}", response_model=UserResponseDTO)
async def get_user(user_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a user by ID.

    **Returns:**
    - 200: User found
    - 404: User not found
    """
    result = await GetUser(SqlAlchemyUserRepository(session)).execute(user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
