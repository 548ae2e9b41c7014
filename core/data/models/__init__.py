"""Database models."""

from .base import Base
from .order_model import OrderItemModel, OrderModel
from .product_model import ProductModel, ProductVariantModel
from .user_model import AddressModel, UserModel

__all__ = [
    "AddressModel",
    "Base",
    "OrderItemModel",
    "OrderModel",
    "ProductModel",
    "ProductVariantModel",
    "UserModel",
]
