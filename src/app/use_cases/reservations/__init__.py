"""Reservation lifecycle use cases"""
from .create_reservation import CreateReservation
from .cancel_reservation import CancelReservation
from .complete_reservation import CompleteReservation
from .get_reservation import GetReservation
from .generate_contract import GenerateContract
from .get_contract import GetContract, RenderContractPdf
from .dtos import (
    CreateReservationCommandDTO,
    ReservationResponseDTO,
    GenerateContractCommandDTO,
    ContractResponseDTO,
    ContractPdfResponseDTO,
)

__all__ = [
    "CreateReservation",
    "CancelReservation",
    "CompleteReservation",
    "GetReservation",
    "GenerateContract",
    "GetContract",
    "RenderContractPdf",
    "CreateReservationCommandDTO",
    "ReservationResponseDTO",
    "GenerateContractCommandDTO",
    "ContractResponseDTO",
    "ContractPdfResponseDTO",
]
