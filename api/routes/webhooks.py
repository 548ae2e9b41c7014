"""
Inbound webhook endpoints (payment gateway and content mirror).

Both handlers read the raw body first; signatures are checked over the
exact bytes before any JSON parsing.
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from api.dependencies import get_order_reconciler, get_payment_webhook_service, get_settings
from core.application.dtos import StatusWebhookResponseDTO
from core.application.services import (
    IgnoredWebhook,
    OrderReconciler,
    PaymentWebhookService,
)
from core.domain.exceptions import InvalidSignatureError, ValidationError
from core.infrastructure.content_mirror import verify_mirror_signature
from core.settings import AppSettings


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# STRIPE
# =============================================================================

@router.post("/stripe", summary="Stripe payment webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias="stripe-signature"),
    service: PaymentWebhookService = Depends(get_payment_webhook_service),
):
    """
    Apply payment_intent.succeeded / payment_intent.payment_failed.

    400 on a bad signature, 200 for handled, irrelevant and unmatched
    events, 500 when the order store fails (the gateway retries later).
    """
    body = await request.body()
    try:
        outcome = await service.handle(body, stripe_signature)
    except InvalidSignatureError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid signature"})

    return {"received": True, "outcome": outcome}


@router.get("/stripe")
async def stripe_webhook_info():
    return {"message": "Stripe payment webhook endpoint", "endpoint": "/api/webhooks/stripe"}


# =============================================================================
# SANITY
# =============================================================================

@router.post("/sanity-order-status", summary="Content mirror order status webhook")
async def sanity_order_status_webhook(
    request: Request,
    x_sanity_signature: Optional[str] = Header(default=None, alias="x-sanity-signature"),
    reconciler: OrderReconciler = Depends(get_order_reconciler),
    settings: AppSettings = Depends(get_settings),
):
    """
    Apply an order status change made in the content mirror.

    401 on a bad signature, 200 for irrelevant events, 404 when the
    document (or its local order) is missing, 500 when the store fails.
    """
    body = await request.body()
    verify_mirror_signature(body, x_sanity_signature, settings.sanity.webhook_secret)

    try:
        event = json.loads(body)
    except ValueError as e:
        raise ValidationError(f"Malformed webhook body: {e}") from e
    if not isinstance(event, dict):
        raise ValidationError("Webhook body must be a JSON object")

    logger.info(
        f"Received Sanity webhook: {event.get('_type')} {event.get('_id')} "
        f"({event.get('transition')}, changed={event.get('changedFields')})"
    )
    result = await reconciler.on_remote_order_updated(event)

    if isinstance(result, IgnoredWebhook):
        logger.info(f"Ignoring webhook: {result.reason}")
        return StatusWebhookResponseDTO(message=result.reason).model_dump(exclude_none=True)

    message = (
        f"Order {result.order_id} status updated to {result.new_status.value}"
        if result.applied
        else f"Order {result.order_id} already has a newer status; event ignored"
    )
    return StatusWebhookResponseDTO(
        success=True,
        order_id=result.order_id,
        old_status=result.old_status,
        new_status=result.new_status.value,
        message=message,
    ).model_dump(by_alias=True, exclude_none=True)


@router.get("/sanity-order-status")
async def sanity_order_status_info():
    return {
        "message": "Sanity order status webhook endpoint",
        "endpoint": "/api/webhooks/sanity-order-status",
    }
