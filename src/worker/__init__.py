"""Background workers for the rental marketplace"""
from .inventory_sync import InventorySyncWorker

__all__ = ["InventorySyncWorker"]
