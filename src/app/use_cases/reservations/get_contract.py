"""GetContract and RenderContractPdf Use Cases"""

import base64
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.pdf_service import PdfService
from src.app.repositories.contract_repository import ContractRepository
from src.app.repositories.user_repository import UserRepository
from src.app.repositories.vehicle_repository import VehicleRepository
from .dtos import ContractPdfResponseDTO, ContractResponseDTO
from .mappers import to_contract_dto


class GetContract:

    def __init__(self, contract_repo: ContractRepository):
        self.contract_repo = contract_repo

    async def execute(self, contract_id: int) -> Result[ContractResponseDTO]:
        try:
            contract = await self.contract_repo.get_by_id(contract_id)
            if not contract:
                return Return.err(
                    Error(code="CONTRACT_NOT_FOUND", message=f"Contract {contract_id} not found")
                )
            return Return.ok(to_contract_dto(contract))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_CONTRACT_FAILED",
                    message="Failed to retrieve contract",
                    reason=str(e),
                )
            )


class RenderContractPdf:
    """
    Use Case: Render a contract as PDF

    Flow:
    1. Retrieve contract, vehicle and customer
    2. Generate PDF using PDF service
    3. Return response with PDF as base64
    """

    def __init__(
        self,
        contract_repo: ContractRepository,
        vehicle_repo: VehicleRepository,
        user_repo: UserRepository,
        pdf_service: PdfService,
        company_name: str = "Rental Marketplace",
        company_address: str = "1 Fleet Street, Motor City, MC 10001",
    ):
        self.contract_repo = contract_repo
        self.vehicle_repo = vehicle_repo
        self.user_repo = user_repo
        self.pdf_service = pdf_service
        self.company_name = company_name
        self.company_address = company_address

    async def execute(self, contract_id: int) -> Result[ContractPdfResponseDTO]:
        try:
            contract = await self.contract_repo.get_by_id(contract_id)
            if not contract:
                return Return.err(
                    Error(code="CONTRACT_NOT_FOUND", message=f"Contract {contract_id} not found")
                )

            vehicle = await self.vehicle_repo.get_by_id(contract.vehicle_id)
            customer = await self.user_repo.get_by_id(contract.customer_id)

            pdf_bytes = self.pdf_service.generate_rental_contract(
                contract=contract,
                vehicle=vehicle,
                customer=customer,
                company_name=self.company_name,
                company_address=self.company_address,
            )

            return Return.ok(
                ContractPdfResponseDTO(
                    contract_id=contract.id,
                    filename=f"contract-{contract.id}.pdf",
                    pdf_base64=base64.b64encode(pdf_bytes).decode("utf-8"),
                    generated_at=datetime.utcnow(),
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="RENDER_CONTRACT_FAILED",
                    message="Failed to render contract PDF",
                    reason=str(e),
                )
            )
