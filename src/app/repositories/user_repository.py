"""User Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.user import User, UserRole


class UserRepository(ABC):
    """Repository interface for User persistence"""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def count_by_role(self, role: UserRole, active_only: bool = False) -> int:
        pass
