"""Static mappers for domain entities ↔ database models."""

from typing import Optional

from sqlalchemy import inspect

from core.domain.entities import Address, Order, OrderItem, Product, ProductVariant, User

from .models import (
    AddressModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
    ProductVariantModel,
    UserModel,
)


def _loaded(model, attribute: str):
    """Return a relationship value only if it is already loaded (never lazy-load)."""
    if attribute in inspect(model).unloaded:
        return None
    return getattr(model, attribute)


class OrderItemMapper:
    """Static mapper for OrderItem ↔ OrderItemModel transformation."""

    @staticmethod
    def to_domain(model: OrderItemModel) -> OrderItem:
        """Convert ORM model to domain entity.

        Args:
            model: OrderItemModel instance

        Returns:
            OrderItem domain entity
        """
        product = _loaded(model, "product")
        return OrderItem(
            id=model.id,
            product_id=model.product_id,
            variant_id=model.variant_id,
            quantity=model.quantity,
            price=model.price,
            product_name=product.name if product is not None else None,
        )

    @staticmethod
    def to_persistence(entity: OrderItem, order_id: str, position: int = 0) -> OrderItemModel:
        """Convert domain entity to ORM model.

        Args:
            entity: OrderItem domain entity
            order_id: Owning order id
            position: Index of the item within the order

        Returns:
            OrderItemModel instance
        """
        model = OrderItemModel(
            order_id=order_id,
            product_id=entity.product_id,
            variant_id=entity.variant_id,
            quantity=entity.quantity,
            price=entity.price,
            position=position,
        )
        if entity.id:
            model.id = entity.id
        return model


class OrderMapper:
    """Static mapper for Order ↔ OrderModel transformation with nested items."""

    @staticmethod
    def to_domain(model: OrderModel) -> Order:
        """Convert ORM model to domain aggregate (with nested items).

        Relationships that were not eagerly loaded are left empty.

        Args:
            model: OrderModel instance

        Returns:
            Order domain aggregate
        """
        items = _loaded(model, "items") or []
        user: Optional[UserModel] = _loaded(model, "user")
        address: Optional[AddressModel] = _loaded(model, "shipping_address")

        return Order(
            id=model.id,
            order_number=model.order_number,
            user_id=model.user_id,
            total=model.total,
            status=model.status,
            items=[OrderItemMapper.to_domain(item) for item in items],
            stripe_payment_intent_id=model.stripe_payment_intent_id,
            shipping_address_id=model.shipping_address_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
            status_changed_at=model.status_changed_at,
            revision=model.revision or 0,
            user_email=user.email if user is not None else None,
            user_name=user.name if user is not None else None,
            shipping_address=AddressMapper.to_domain(address) if address is not None else None,
        )

    @staticmethod
    def to_persistence(entity: Order) -> OrderModel:
        """Convert domain aggregate to ORM model (with nested items).

        Args:
            entity: Order domain aggregate

        Returns:
            OrderModel instance
        """
        order_model = OrderModel(id=entity.id)
        OrderMapper.update_persistence(entity, order_model)

        order_model.items = [
            OrderItemMapper.to_persistence(item, entity.id, position)
            for position, item in enumerate(entity.items)
        ]

        return order_model

    @staticmethod
    def update_persistence(entity: Order, model: OrderModel) -> OrderModel:
        """Copy the order's own columns onto an ORM model.

        Items are not touched; they are replaced through the repository.
        `revision` is owned by SQLAlchemy's version counter.

        Args:
            entity: Order domain aggregate
            model: Existing OrderModel instance

        Returns:
            Updated OrderModel instance
        """
        model.order_number = entity.order_number
        model.user_id = entity.user_id
        model.total = entity.total
        model.status = entity.status.value
        model.stripe_payment_intent_id = entity.stripe_payment_intent_id
        model.shipping_address_id = entity.shipping_address_id
        model.created_at = entity.created_at
        model.updated_at = entity.updated_at
        model.status_changed_at = entity.status_changed_at
        return model


class UserMapper:
    """Static mapper for User ↔ UserModel."""

    @staticmethod
    def to_domain(model: UserModel) -> User:
        return User(
            id=model.id,
            email=model.email,
            name=model.name,
            firebase_uid=model.firebase_uid,
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: User) -> UserModel:
        return UserModel(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            firebase_uid=entity.firebase_uid,
            created_at=entity.created_at,
        )


class AddressMapper:
    """Static mapper for Address ↔ AddressModel."""

    @staticmethod
    def to_domain(model: AddressModel) -> Address:
        return Address(
            id=model.id,
            user_id=model.user_id,
            street=model.street,
            city=model.city,
            state=model.state,
            postal_code=model.postal_code,
            country=model.country,
            is_default=bool(model.is_default),
            created_at=model.created_at,
        )

    @staticmethod
    def to_persistence(entity: Address) -> AddressModel:
        return AddressModel(
            id=entity.id,
            user_id=entity.user_id,
            street=entity.street,
            city=entity.city,
            state=entity.state,
            postal_code=entity.postal_code,
            country=entity.country,
            is_default=entity.is_default,
            created_at=entity.created_at,
        )


class ProductMapper:
    """Static mapper for Product ↔ ProductModel (with variants)."""

    @staticmethod
    def to_domain(model: ProductModel) -> Product:
        variants = _loaded(model, "variants") or []
        return Product(
            id=model.id,
            slug=model.slug,
            name=model.name,
            price=model.price,
            description=model.description,
            images=list(model.images or []),
            in_stock=bool(model.in_stock),
            variants=[
                ProductVariant(id=v.id, product_id=v.product_id, name=v.name, stock=v.stock)
                for v in variants
            ],
        )

    @staticmethod
    def to_persistence(entity: Product) -> ProductModel:
        model = ProductModel(
            id=entity.id,
            slug=entity.slug,
            name=entity.name,
            price=entity.price,
            description=entity.description,
            images=list(entity.images),
            in_stock=entity.in_stock,
        )
        model.variants = [
            ProductVariantModel(id=v.id, product_id=entity.id, name=v.name, stock=v.stock)
            for v in entity.variants
        ]
        return model
