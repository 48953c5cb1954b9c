"""SQLAlchemy implementation of ContractRepository"""

from datetime import datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.contract_repository import ContractRepository
from src.domain.contract import Contract


class SqlAlchemyContractRepository(ContractRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, contract_id: int) -> Optional[Contract]:
        stmt = select(Contract).where(Contract.id == contract_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_reservation_id(self, reservation_id: int) -> Optional[Contract]:
        stmt = select(Contract).where(Contract.reservation_id == reservation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, contract: Contract) -> Contract:
        self.session.add(contract)
        await self.session.flush()
        await self.session.refresh(contract)
        return contract

    async def update(self, contract: Contract) -> Contract:
        contract.updated_at = datetime.utcnow()
        self.session.add(contract)
        await self.session.flush()
        return contract
