"""SQLAlchemy repository implementations."""

from .order_repository_impl import SqlAlchemyOrderRepository
from .product_repository_impl import SqlAlchemyProductRepository
from .user_repository_impl import SqlAlchemyAddressRepository, SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyAddressRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyUserRepository",
]
