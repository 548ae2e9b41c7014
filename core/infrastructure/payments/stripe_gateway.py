"""
Stripe Payment Gateway Implementation.

Creates payment intents / checkout sessions and verifies webhooks with
the official stripe library. Stripe calls are blocking, so they run in a
worker thread.
"""
import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import stripe

from core.application.interfaces import (
    CheckoutSessionResult,
    IPaymentGateway,
    PaymentEvent,
    PaymentIntentResult,
)
from core.domain.exceptions import InvalidSignatureError, PaymentGatewayError
from core.domain.value_objects import from_unix_seconds
from core.settings.modules.stripe_settings import StripeSettings


logger = logging.getLogger(__name__)


class StripePaymentGateway(IPaymentGateway):
    """
    Stripe implementation of the payment gateway.

    Every call is bounded by the HTTP client timeout and the configured
    number of network retries.
    """

    def __init__(self, settings: StripeSettings):
        """
        Initialize Stripe gateway.

        Args:
            settings: Stripe settings with API key and webhook secret
        """
        self.settings = settings
        stripe.max_network_retries = settings.max_network_retries
        stripe.default_http_client = stripe.RequestsClient(timeout=settings.timeout_seconds)
        if not settings.secret_key:
            logger.warning("STRIPE_SECRET_KEY not configured, payment calls will fail")
        logger.info("StripePaymentGateway initialized")

    async def create_payment_intent(
        self,
        amount_cents: int,
        metadata: Dict[str, str],
        description: str,
        receipt_email: Optional[str] = None,
        shipping: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntentResult:
        params: Dict[str, Any] = {
            "amount": amount_cents,
            "currency": self.settings.currency,
            "metadata": metadata,
            "description": description,
            "payment_method_types": ["card"],
            "statement_descriptor": self.settings.statement_descriptor,
            "capture_method": "automatic",
        }
        if receipt_email:
            params["receipt_email"] = receipt_email
        if shipping:
            params["shipping"] = shipping

        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                api_key=self.settings.secret_key,
                idempotency_key=idempotency_key,
                **params,
            )
        except stripe.StripeError as e:
            logger.error(f"❌ Stripe payment intent creation failed: {e}")
            raise PaymentGatewayError(f"Payment intent creation failed: {e}") from e

        logger.info(f"Created payment intent {intent.id} for {amount_cents} cents")
        return PaymentIntentResult(intent_id=intent.id, client_secret=intent.client_secret)

    async def create_checkout_session(
        self,
        line_items: List[Dict[str, Any]],
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
        idempotency_key: Optional[str] = None,
    ) -> CheckoutSessionResult:
        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create,
                api_key=self.settings.secret_key,
                idempotency_key=idempotency_key,
                mode="payment",
                payment_method_types=["card"],
                line_items=line_items,
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error(f"❌ Stripe checkout session creation failed: {e}")
            raise PaymentGatewayError(f"Checkout session creation failed: {e}") from e

        logger.info(f"Created checkout session {session.id}")
        return CheckoutSessionResult(session_id=session.id, url=session.url)

    def verify_webhook_event(self, raw_body: bytes, signature_header: Optional[str]) -> PaymentEvent:
        if not signature_header:
            raise InvalidSignatureError("Missing Stripe-Signature header")

        # Signature is checked over the raw bytes before anything is parsed
        try:
            stripe.Webhook.construct_event(
                raw_body,
                signature_header,
                self.settings.webhook_secret,
                tolerance=self.settings.webhook_tolerance,
            )
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature invalid: {e}")
            raise InvalidSignatureError("Invalid signature") from e
        except ValueError as e:
            raise InvalidSignatureError(f"Malformed webhook payload: {e}") from e

        payload = json.loads(raw_body)
        data_object = (payload.get("data") or {}).get("object") or {}
        created = payload.get("created")

        return PaymentEvent(
            event_id=payload.get("id", ""),
            kind=payload.get("type", ""),
            intent_id=data_object.get("id"),
            occurred_at=from_unix_seconds(created) if created is not None else None,
            payload=payload,
        )
