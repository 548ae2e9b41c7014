"""Payment gateway contract."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


@dataclass(frozen=True)
class PaymentIntentResult:
    intent_id: str
    client_secret: str


@dataclass(frozen=True)
class CheckoutSessionResult:
    session_id: str
    url: Optional[str]


@dataclass(frozen=True)
class PaymentEvent:
    """A verified, decoded webhook event."""
    event_id: str
    kind: str
    intent_id: Optional[str] = None
    occurred_at: Optional[datetime] = None
    payload: Dict[str, Any] = field(default_factory=dict)


class IPaymentGateway(ABC):
    """
    Interface for the payment processor.

    Implementations hold the provider credentials; callers only pass
    amounts in integer cents and string metadata.
    """

    @abstractmethod
    async def create_payment_intent(
        self,
        amount_cents: int,
        metadata: Dict[str, str],
        description: str,
        receipt_email: Optional[str] = None,
        shipping: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntentResult:
        """
        Create a payment intent.

        Args:
            amount_cents: Amount to charge, computed server side
            metadata: Order reconstruction data (all values strings)
            description: Human readable description
            receipt_email: Customer email for the receipt
            shipping: Provider shipping block ({name, address})
            idempotency_key: Provider idempotency key for safe retries

        Returns:
            PaymentIntentResult

        Raises:
            PaymentGatewayError: If the provider call fails
        """
        pass

    @abstractmethod
    async def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        idempotency_key: Optional[str] = None,
    ) -> CheckoutSessionResult:
        """
        Create a hosted checkout session.

        Raises:
            PaymentGatewayError: If the provider call fails
        """
        pass

    @abstractmethod
    def verify_webhook_event(self, raw_body: bytes, signature_header: Optional[str]) -> PaymentEvent:
        """
        Verify the signature over the raw body, then decode the event.

        Raises:
            InvalidSignatureError: If the signature does not match
        """
        pass
