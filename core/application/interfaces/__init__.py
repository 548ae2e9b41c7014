"""Application layer interfaces."""
from .content_mirror import IContentMirror
from .payment_gateway import (
    PAYMENT_FAILED,
    PAYMENT_SUCCEEDED,
    CheckoutSessionResult,
    IPaymentGateway,
    PaymentEvent,
    PaymentIntentResult,
)
from .token_verifier import AuthenticatedPrincipal, ITokenVerifier

__all__ = [
    "AuthenticatedPrincipal",
    "CheckoutSessionResult",
    "IContentMirror",
    "IPaymentGateway",
    "ITokenVerifier",
    "PAYMENT_FAILED",
    "PAYMENT_SUCCEEDED",
    "PaymentEvent",
    "PaymentIntentResult",
]
