"""Contract Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.contract import Contract


class ContractRepository(ABC):

    @abstractmethod
    async def get_by_id(self, contract_id: int) -> Optional[Contract]:
        pass

    @abstractmethod
    async def get_by_reservation_id(self, reservation_id: int) -> Optional[Contract]:
        pass

    @abstractmethod
    async def create(self, contract: Contract) -> Contract:
        pass

    @abstractmethod
    async def update(self, contract: Contract) -> Contract:
        pass
