"""Application DTOs."""
from .account_dto import AddressDTO, CreateAddressRequest, OrderDTO, OrderItemDTO, OrderListDTO, UserDTO
from .checkout_dto import (
    CheckoutItemDTO,
    CheckoutSessionResponse,
    CreateCheckoutSessionRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    PaymentMetadataDTO,
    ShippingInfoDTO,
)
from .sync_dto import StatusWebhookResponseDTO, SyncResponseDTO, SyncStatsDTO

__all__ = [
    "AddressDTO",
    "CheckoutItemDTO",
    "CheckoutSessionResponse",
    "CreateAddressRequest",
    "CreateCheckoutSessionRequest",
    "CreatePaymentIntentRequest",
    "OrderDTO",
    "OrderItemDTO",
    "OrderListDTO",
    "PaymentIntentResponse",
    "PaymentMetadataDTO",
    "ShippingInfoDTO",
    "StatusWebhookResponseDTO",
    "SyncResponseDTO",
    "SyncStatsDTO",
    "UserDTO",
]
