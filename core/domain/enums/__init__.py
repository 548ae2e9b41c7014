"""Domain enums."""

from .order_status import OrderStatus
from .sync_status import SyncChannel, SyncStatus

__all__ = ["OrderStatus", "SyncChannel", "SyncStatus"]
