"""Inventory use cases"""
from .register_vehicle import RegisterVehicle
from .get_vehicle import GetVehicle
from .check_availability import CheckAvailability
from .list_available_vehicles import ListAvailableVehicles
from .mark_maintenance import MarkMaintenance, MarkAvailable
from .manage_vehicles import ListVehicles, UpdateVehicle, DeleteVehicle
from .sync_inventory import SyncInventory
from .dtos import (
    RegisterVehicleCommandDTO,
    UpdateVehicleCommandDTO,
    VehicleResponseDTO,
    VehicleListResponseDTO,
    AvailabilityResponseDTO,
    AvailableVehiclesResponseDTO,
    InventorySyncResultDTO,
)

__all__ = [
    "RegisterVehicle",
    "GetVehicle",
    "CheckAvailability",
    "ListAvailableVehicles",
    "MarkMaintenance",
    "MarkAvailable",
    "ListVehicles",
    "UpdateVehicle",
    "DeleteVehicle",
    "SyncInventory",
    "RegisterVehicleCommandDTO",
    "UpdateVehicleCommandDTO",
    "VehicleResponseDTO",
    "VehicleListResponseDTO",
    "AvailabilityResponseDTO",
    "AvailableVehiclesResponseDTO",
    "InventorySyncResultDTO",
]
