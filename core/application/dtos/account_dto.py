"""DTOs for users, addresses and order history."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.domain.entities import Address, Order, User


class UserDTO(BaseModel):
    id: str
    email: str
    name: Optional[str] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(id=user.id, email=user.email, name=user.name)


class AddressDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(..., alias="userId")
    street: str
    city: str
    state: str
    postal_code: str = Field(..., alias="postalCode")
    country: str
    is_default: bool = Field(..., alias="isDefault")
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_entity(cls, address: Address) -> "AddressDTO":
        return cls(
            id=address.id,
            user_id=address.user_id,
            street=address.street,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
            is_default=address.is_default,
            created_at=address.created_at,
        )


class CreateAddressRequest(BaseModel):
    """All fields are checked by the service so a missing one is a plain 400."""

    model_config = ConfigDict(populate_by_name=True)

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    country: Optional[str] = None
    is_default: bool = Field(default=False, alias="isDefault")


class OrderItemDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    product_id: str = Field(..., alias="productId")
    variant_id: Optional[str] = Field(default=None, alias="variantId")
    name: Optional[str] = None
    quantity: int
    price: float


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    order_number: str = Field(..., alias="orderNumber")
    status: str
    total: float
    stripe_payment_intent_id: Optional[str] = Field(default=None, alias="stripePaymentIntentId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    items: List[OrderItemDTO] = Field(default_factory=list)
    shipping_address: Optional[AddressDTO] = Field(default=None, alias="shippingAddress")

    @classmethod
    def from_entity(cls, order: Order) -> "OrderDTO":
        return cls(
            id=order.id,
            order_number=order.order_number,
            status=order.status.value,
            total=float(order.total),
            stripe_payment_intent_id=order.stripe_payment_intent_id,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemDTO(
                    id=item.id,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    name=item.product_name,
                    quantity=item.quantity,
                    price=float(item.price),
                )
                for item in order.items
            ],
            shipping_address=(
                AddressDTO.from_entity(order.shipping_address) if order.shipping_address else None
            ),
        )


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list)
