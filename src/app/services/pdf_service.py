"""PDF Generation Service Interface

Defines the contract for PDF generation operations.
"""

from abc import ABC, abstractmethod
from src.domain.contract import Contract
from src.domain.user import User
from src.domain.vehicle import Vehicle


class PdfService(ABC):
    """
    Service interface for PDF generation

    Provides PDF generation capabilities for rental contracts.
    """

    @abstractmethod
    def generate_rental_contract(
        self,
        contract: Contract,
        vehicle: Vehicle,
        customer: User,
        company_name: str = "Rental Marketplace",
        company_address: str = "1 Fleet Street, Motor City, MC 10001",
    ) -> bytes:
        """
        Generate a rental contract PDF

        Args:
            contract: Contract entity with rental period and terms
            vehicle: Rented vehicle
            customer: Renting customer
            company_name: Company name to display on the contract
            company_address: Company address to display on the contract

        Returns:
            PDF document as bytes
        """
        pass
