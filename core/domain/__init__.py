"""Domain layer - pure domain models and interfaces."""

from .entities import Address, Order, OrderItem, Product, ProductVariant, User
from .enums import OrderStatus, SyncChannel, SyncStatus
from .repositories import AddressRepository, OrderRepository, ProductRepository, UserRepository
from .value_objects import ExecutionID, MirrorDocumentId, OrderNumber, SyncStats

__all__ = [
    "Address",
    "AddressRepository",
    "ExecutionID",
    "MirrorDocumentId",
    "Order",
    "OrderItem",
    "OrderNumber",
    "OrderRepository",
    "OrderStatus",
    "Product",
    "ProductRepository",
    "ProductVariant",
    "SyncChannel",
    "SyncStats",
    "SyncStatus",
    "User",
    "UserRepository",
]
