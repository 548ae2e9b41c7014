"""Data layer - infrastructure persistence and mapping."""

from .mappers import AddressMapper, OrderItemMapper, OrderMapper, ProductMapper, UserMapper
from .models import (
    AddressModel,
    Base,
    OrderItemModel,
    OrderModel,
    ProductModel,
    ProductVariantModel,
    UserModel,
)
from .repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyUserRepository,
)
from .uow import TRANSIENT_DB_ERRORS, UnitOfWork, create_uow, run_in_transaction

__all__ = [
    "AddressMapper",
    "AddressModel",
    "Base",
    "create_uow",
    "OrderItemMapper",
    "OrderItemModel",
    "OrderMapper",
    "OrderModel",
    "ProductMapper",
    "ProductModel",
    "ProductVariantModel",
    "run_in_transaction",
    "SqlAlchemyAddressRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyUserRepository",
    "TRANSIENT_DB_ERRORS",
    "UnitOfWork",
    "UserMapper",
    "UserModel",
]
