"""SQLAlchemy implementation of UserRepository"""

from datetime import datetime
from typing import Optional
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_repository import UserRepository
from src.domain.user import User, UserRole


class SqlAlchemyUserRepository(UserRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        user.updated_at = datetime.utcnow()
        self.session.add(user)
        await self.session.flush()
        return user

    async def count_by_role(self, role: UserRole, active_only: bool = False) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == role)
        if active_only:
            stmt = stmt.where(User.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return result.scalar_one()
