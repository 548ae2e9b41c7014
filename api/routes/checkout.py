"""
Checkout endpoints.

Create payment intents (with the order that tracks them) and hosted
checkout sessions.
"""
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Header, status

from api.dependencies import get_checkout_service
from core.application.dtos import (
    CheckoutSessionResponse,
    CreateCheckoutSessionRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
)
from core.application.services import CheckoutService


logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    status_code=status.HTTP_200_OK,
    summary="Create a payment intent for a cart",
)
async def create_payment_intent(
    request: CreatePaymentIntentRequest,
    idempotency_key: Optional[str] = Header(default=None, alias="Idempotency-Key"),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Create a Stripe payment intent and the PROCESSING order for it.

    **Returns:** `clientSecret` for the payment form, plus the ids and the
    server computed total. Retries with the same `Idempotency-Key` reuse
    the same intent and order.
    """
    if idempotency_key and not request.idempotency_key:
        request = request.model_copy(update={"idempotency_key": idempotency_key})
    return await service.create_payment_intent(request)


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Create a hosted checkout session",
)
async def create_checkout_session(
    request: CreateCheckoutSessionRequest,
    origin: Optional[str] = Header(default=None),
    service: CheckoutService = Depends(get_checkout_service),
):
    return await service.create_checkout_session(request, origin=origin)
