"""Domain entities."""

from .order import Order, OrderItem, to_amount
from .product import Product, ProductVariant
from .user import Address, User

__all__ = [
    "Address",
    "Order",
    "OrderItem",
    "Product",
    "ProductVariant",
    "User",
    "to_amount",
]
