"""Contract API Routes

FastAPI routes for reading rental contracts and downloading them as PDF.
"""

import base64
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.services.pdf_service import PdfService
from src.app.use_cases.reservations import GetContract, RenderContractPdf, ContractResponseDTO
from src.adapter.repositories.contract_repository import SqlAlchemyContractRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.repositories.vehicle_repository import SqlAlchemyVehicleRepository
from src.depends import get_session, get_pdf_service
from src.api.error import ClientError

router = APIRouter(prefix="/contracts", tags=["Contracts"])


@router.get("/{contract_id}", response_model=ContractResponseDTO)
async def get_contract(contract_id: int, session: AsyncSession = Depends(get_session)):
    """
    Retrieve a contract by ID.

    **Returns:**
    - 200: Contract found
    - 404: Contract not found
    """
    result = await GetContract(SqlAlchemyContractRepository(session)).execute(contract_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{contract_id}/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: {
            "description": "Contract not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CONTRACT_NOT_FOUND",
                            "message": "Contract 5 not found"
                        }
                    }
                }
            }
        },
    }
)
async def download_contract_pdf(
    contract_id: int,
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    """
    Download a contract as PDF file.

    **Returns:**
    - 200: PDF file as binary response
    - 404: Contract not found
    """
    use_case = RenderContractPdf(
        contract_repo=SqlAlchemyContractRepository(session),
        vehicle_repo=SqlAlchemyVehicleRepository(session),
        user_repo=SqlAlchemyUserRepository(session),
        pdf_service=pdf_service,
        company_name=ApplicationConfig.CONTRACT_COMPANY_NAME,
        company_address=ApplicationConfig.CONTRACT_COMPANY_ADDRESS,
    )
    result = await use_case.execute(contract_id)

    if result.is_err():
        raise ClientError(result.error)

    pdf_bytes = base64.b64decode(result.value.pdf_base64)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename={result.value.filename}"
        }
    )
