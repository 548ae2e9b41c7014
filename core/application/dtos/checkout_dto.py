"""
DTOs for checkout operations.

Field aliases keep the storefront's camelCase wire format.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# REQUEST DTOs
# =============================================================================

class CheckoutItemDTO(BaseModel):
    """A cart line as sent by the storefront."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Product slug or id")
    original_id: Optional[str] = Field(default=None, alias="originalId")
    variant_id: Optional[str] = Field(default=None, alias="variantId")
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    price: Decimal = Field(..., ge=0, description="Unit price shown to the customer")
    quantity: int = Field(..., gt=0)


class PaymentMetadataDTO(BaseModel):
    """Customer data attached to a payment intent."""

    model_config = ConfigDict(extra="allow")

    customer_name: str = ""
    customer_email: str = ""
    shipping_address: str = Field(
        default="",
        description="street, city, state, postal code, country",
    )
    user_id: str = Field(default="", description="Auth provider subject id")


class CreatePaymentIntentRequest(BaseModel):
    """Request DTO for POST /api/create-payment-intent."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "items": [{"id": "grail-tee", "variantId": "grail-tee-m", "price": 10.0, "quantity": 2}],
                "metadata": {
                    "customer_name": "Ada Lovelace",
                    "customer_email": "ada@example.com",
                    "shipping_address": "1 Main St, Springfield, IL, 62701, US",
                    "user_id": "firebase-uid",
                },
                "idempotencyKey": "cart-7f2c",
            }
        },
    )

    items: List[CheckoutItemDTO] = Field(default_factory=list)
    shipping: Optional[Dict[str, Any]] = None
    metadata: PaymentMetadataDTO = Field(default_factory=PaymentMetadataDTO)
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")


class ShippingInfoDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")
    country: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def address_line(self) -> str:
        return f"{self.address}, {self.city}, {self.state}, {self.zip_code}, {self.country}"


class CreateCheckoutSessionRequest(BaseModel):
    """Request DTO for POST /api/create-checkout-session."""

    model_config = ConfigDict(populate_by_name=True)

    items: List[CheckoutItemDTO] = Field(default_factory=list)
    return_url: Optional[str] = Field(default=None, alias="returnUrl")
    shipping_info: Optional[ShippingInfoDTO] = Field(default=None, alias="shippingInfo")
    user_id: Optional[str] = Field(default=None, alias="userId")
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")


# =============================================================================
# RESPONSE DTOs
# =============================================================================

class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(..., alias="clientSecret")
    payment_intent_id: str = Field(..., alias="paymentIntentId")
    order_id: Optional[str] = Field(default=None, alias="orderId")
    total: float


class CheckoutSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    url: Optional[str] = None
