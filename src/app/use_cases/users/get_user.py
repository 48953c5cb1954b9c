"""GetUser Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.user_repository import UserRepository
from .create_user import to_user_dto
from .dtos import UserResponseDTO


class GetUser:

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def execute(self, user_id: int) -> Result[UserResponseDTO]:
        try:
            user = await self.user_repo.get_by_id(user_id)
            if not user:
                return Return.err(
                    Error(code="USER_NOT_FOUND", message=f"User {user_id} not found")
                )
            return Return.ok(to_user_dto(user))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_USER_FAILED",
                    message="Failed to retrieve user",
                    reason=str(e),
                )
            )
