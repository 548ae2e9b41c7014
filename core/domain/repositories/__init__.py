"""Repository interfaces."""

from .order_repository import OrderRepository
from .product_repository import ProductRepository
from .user_repository import AddressRepository, UserRepository

__all__ = [
    "AddressRepository",
    "OrderRepository",
    "ProductRepository",
    "UserRepository",
]
