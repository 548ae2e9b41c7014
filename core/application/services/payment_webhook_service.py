"""Applies verified payment-gateway events to orders."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import (
    PAYMENT_FAILED,
    PAYMENT_SUCCEEDED,
    IPaymentGateway,
    PaymentEvent,
)
from core.data.uow import UnitOfWork, run_in_transaction
from core.domain.enums import OrderStatus
from core.infrastructure.retry import NO_RETRY, RetryPolicy


logger = logging.getLogger(__name__)

STATUS_BY_EVENT = {
    PAYMENT_SUCCEEDED: OrderStatus.PROCESSING,
    PAYMENT_FAILED: OrderStatus.CANCELLED,
}

# Outcomes reported back to the webhook route
APPLIED = "applied"
STALE = "stale"
UNMATCHED = "unmatched"
IGNORED = "ignored"


class PaymentWebhookService:
    """
    Payment webhook handling.

    Unmatched intents and unknown event kinds are acknowledged so the
    gateway does not redeliver them forever. Database failures propagate
    so the gateway retries later.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        retry_policy: RetryPolicy = NO_RETRY,
    ) -> None:
        self._session_factory = session_factory
        self._gateway = gateway
        self._retry_policy = retry_policy

    async def handle(self, raw_body: bytes, signature_header: Optional[str]) -> str:
        """
        Verify and apply one webhook delivery.

        Raises:
            InvalidSignatureError: Before anything is parsed or written
        """
        event = self._gateway.verify_webhook_event(raw_body, signature_header)
        return await self.apply_event(event)

    async def apply_event(self, event: PaymentEvent) -> str:
        status = STATUS_BY_EVENT.get(event.kind)
        if status is None:
            logger.info(f"Unhandled event type: {event.kind}")
            return IGNORED
        if not event.intent_id:
            logger.error(f"Event {event.event_id} ({event.kind}) carries no payment intent id")
            return UNMATCHED

        async def work(uow: UnitOfWork) -> str:
            order = await uow.orders.find_by_payment_intent_id(event.intent_id)
            if order is None:
                logger.error(f"No order found for payment intent: {event.intent_id}")
                return UNMATCHED

            if not order.apply_status(status, event.occurred_at):
                return STALE

            await uow.orders.save(order)
            logger.info(
                f"[{uow.execution_id.value}] Order {order.order_number} marked as "
                f"{status.value} after {event.kind} ({event.event_id})"
            )
            return APPLIED

        return await run_in_transaction(
            self._session_factory,
            work,
            self._retry_policy,
            f"apply {event.kind} for {event.intent_id}",
        )
