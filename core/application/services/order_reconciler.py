"""
Order reconciler.

Keeps the order store and the content mirror converging:

- export_orders: push every local order to the mirror (create or replace)
- import_orders: pull every mirror document into the store (full replace
  of items inside one transaction)
- apply_remote_status_change: single-order status update driven by the
  mirror's change webhook

Each batch records a Sync State document; that write is best effort.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.interfaces import IContentMirror
from core.data.uow import UnitOfWork, run_in_transaction
from core.domain.entities import Order, OrderItem, to_amount
from core.domain.enums import OrderStatus, SyncChannel
from core.domain.exceptions import OrderNotFoundError, StorefrontError, ValidationError
from core.domain.value_objects import (
    MirrorDocumentId,
    OrderNumber,
    SyncStats,
    parse_iso8601,
    utc_now,
)
from core.infrastructure.retry import NO_RETRY, RetryPolicy


logger = logging.getLogger(__name__)


@dataclass
class RemoteStatusChange:
    """Result of a status change pulled from one mirror document."""
    order_id: str
    new_status: OrderStatus
    old_status: Optional[str] = None
    applied: bool = True


@dataclass
class IgnoredWebhook:
    """A mirror webhook that needs no local write."""
    reason: str


def build_order_document(order: Order) -> Dict[str, Any]:
    """
    Mirror representation of an order.

    Decimals and datetimes are left as is; the mirror client converts
    them at the wire.
    """
    customer_name = order.user_name or ""
    document: Dict[str, Any] = {
        "_type": "order",
        "_id": MirrorDocumentId.for_order(order.id).value,
        "orderNumber": order.order_number,
        "userId": order.user_id,
        "customerEmail": order.user_email,
        "customerName": customer_name,
        "total": order.total,
        "status": order.status.value,
        "items": [
            {
                "_key": f"item-{item.id}",
                "itemId": item.id,
                "productId": item.product_id,
                "variantId": item.variant_id,
                "name": item.product_name,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.items
        ],
        "stripePaymentIntentId": order.stripe_payment_intent_id,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
    }
    address = order.shipping_address
    if address is not None:
        document["shippingAddress"] = {
            "name": customer_name,
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postalCode": address.postal_code,
            "country": address.country,
        }
    return document


def items_from_document(document: Dict[str, Any]) -> List[OrderItem]:
    """
    Order items of a mirror document.

    Raises:
        KeyError, TypeError, ValueError: If an item is malformed
    """
    items = []
    for raw in document.get("items") or []:
        items.append(
            OrderItem(
                id=raw.get("itemId") or None,
                product_id=raw["productId"],
                variant_id=raw.get("variantId") or None,
                quantity=raw["quantity"],
                price=Decimal(str(raw["price"])),
            )
        )
    return items


class OrderReconciler:
    """Coordinates the order store and the content mirror."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        mirror: IContentMirror,
        retry_policy: RetryPolicy = NO_RETRY,
        export_limit: int = 500,
    ) -> None:
        """
        Args:
            session_factory: SQLAlchemy async session factory
            mirror: Content mirror client
            retry_policy: Retry policy for transient database errors
            export_limit: Page size used when walking the store during a push
        """
        self._session_factory = session_factory
        self._mirror = mirror
        self._retry_policy = retry_policy
        self._export_limit = export_limit

    # --------------------------------------------------------------------- push

    async def export_orders(self) -> SyncStats:
        """
        Push local orders (newest modification first) to the mirror.

        A failing order is counted and skipped; the batch always finishes.
        """
        stats = SyncStats()
        cursor: Optional[Tuple[datetime, str]] = None
        logger.info("Pushing orders to the content mirror")

        while True:
            page: List[Order] = await run_in_transaction(
                self._session_factory,
                lambda uow, after=cursor: uow.orders.find_all(limit=self._export_limit, after=after),
                self._retry_policy,
                "load orders",
            )
            if not page:
                break
            stats.total += len(page)

            for order in page:
                try:
                    outcome = await self._mirror.push_order(build_order_document(order))
                except Exception as e:
                    stats.errors += 1
                    logger.error(f"Error syncing order {order.id}: {e}", exc_info=True)
                    continue
                if outcome == "created":
                    stats.created += 1
                else:
                    stats.updated += 1

            if len(page) < self._export_limit:
                break
            cursor = (page[-1].updated_at, page[-1].id)

        await self._mirror.record_sync_outcome(SyncChannel.PUSH, stats)
        logger.info(
            f"Sync completed. Total: {stats.total}, Created: {stats.created}, "
            f"Updated: {stats.updated}, Errors: {stats.errors}"
        )
        return stats

    # --------------------------------------------------------------------- pull

    async def import_orders(self) -> SyncStats:
        """
        Pull every mirror order into the store.

        Each document is applied in its own transaction; a failing document
        is counted and skipped.
        """
        documents = await self._mirror.fetch_all_orders()
        stats = SyncStats(total=len(documents))
        logger.info(f"Pulling {stats.total} orders from the content mirror")

        for document in documents:
            try:
                created = await run_in_transaction(
                    self._session_factory,
                    lambda uow, document=document: self._import_document(uow, document),
                    self._retry_policy,
                    f"import {document.get('_id') if isinstance(document, dict) else document!r}",
                )
            except Exception as e:
                stats.errors += 1
                logger.error(f"Error syncing order {document!r:.120}: {e}", exc_info=True)
                continue
            if created:
                stats.created += 1
            else:
                stats.updated += 1

        await self._mirror.record_sync_outcome(SyncChannel.PULL, stats)
        logger.info(
            f"Sanity to DB sync completed. Created: {stats.created}, "
            f"Updated: {stats.updated}, Errors: {stats.errors}"
        )
        return stats

    async def _import_document(self, uow: UnitOfWork, document: Dict[str, Any]) -> bool:
        """Apply one mirror document. Returns True when the order was created."""
        order_id = MirrorDocumentId(document["_id"]).order_id
        status = OrderStatus.coerce(document.get("status"))
        items = items_from_document(document)
        total = (
            to_amount(Decimal(str(document["total"])))
            if document.get("total") is not None
            else to_amount(sum((item.line_total for item in items), Decimal("0")))
        )
        created_at = parse_iso8601(document.get("createdAt"))

        existing = await uow.orders.find_by_id(order_id)
        if existing is not None:
            logger.debug(
                f"Updating existing order {order_id}: {existing.status.value} -> {status.value}"
            )
            # Bulk pull replays the mirror's view; it carries no event time
            existing.apply_status(status)
            existing.total = total
            existing.stripe_payment_intent_id = document.get("stripePaymentIntentId") or None
            existing.order_number = document.get("orderNumber") or existing.order_number
            existing.user_id = document.get("userId") or existing.user_id
            existing.created_at = created_at or existing.created_at
            existing.updated_at = utc_now()
            await uow.orders.save(existing)
            await uow.orders.replace_items(order_id, items)
            return False

        user_id = document.get("userId")
        if not user_id:
            raise ValueError(f"Mirror order {document['_id']} has no userId")

        now = utc_now()
        order = Order(
            id=order_id,
            order_number=document.get("orderNumber") or OrderNumber.generate().value,
            user_id=user_id,
            total=total,
            status=status,
            items=items,
            stripe_payment_intent_id=document.get("stripePaymentIntentId") or None,
            created_at=created_at or now,
            updated_at=now,
        )
        await uow.orders.add(order)
        logger.debug(f"Created order {order_id} from the mirror with status {status.value}")
        return True

    # ------------------------------------------------------------ status webhook

    async def on_remote_order_updated(self, event: Dict[str, Any]):
        """
        Filter a mirror change webhook down to order status changes.

        Returns:
            IgnoredWebhook for irrelevant events, otherwise RemoteStatusChange
        """
        if event.get("_type") != "order":
            return IgnoredWebhook("Not an order webhook")
        if event.get("transition") != "update":
            return IgnoredWebhook("Not an update webhook")
        if "status" not in (event.get("changedFields") or []):
            return IgnoredWebhook("Status not changed")
        try:
            MirrorDocumentId(str(event.get("_id") or ""))
        except ValueError:
            # Drafts ("drafts.order-...") never map to a local order
            return IgnoredWebhook("Not an order document")

        previous = event.get("previousValue") or {}
        return await self.apply_remote_status_change(
            event.get("_id") or "",
            previous_status=previous.get("status") if isinstance(previous, dict) else None,
        )

    async def apply_remote_status_change(
        self,
        document_id: str,
        previous_status: Optional[str] = None,
    ) -> RemoteStatusChange:
        """
        Re-fetch one mirror document and apply its status locally.

        The event payload is never trusted; the current document is. The
        document's `_updatedAt` is the event time for the staleness check.

        Raises:
            OrderNotFoundError: Document missing in the mirror or order missing locally
            ContentMirrorError: Mirror could not be read
            ValidationError: Not an order document id
        """
        try:
            order_id = MirrorDocumentId(document_id).order_id
        except ValueError as e:
            raise ValidationError(str(e)) from e

        document = await self._mirror.fetch_order(document_id)
        if not document:
            logger.error(f"Order {document_id} not found in Sanity")
            raise OrderNotFoundError(f"Order {document_id} not found in the content mirror")

        status = OrderStatus.coerce(document.get("status"))
        occurred_at = parse_iso8601(document.get("_updatedAt"))
        logger.info(f"Updating order {order_id} status to: {status.value}")

        async def work(uow: UnitOfWork) -> bool:
            order = await uow.orders.find_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order {order_id} not found")
            if not order.apply_status(status, occurred_at):
                return False
            await uow.orders.save(order)
            return True

        try:
            applied = await run_in_transaction(
                self._session_factory, work, self._retry_policy, f"status change for {order_id}"
            )
        except Exception as e:
            await self._mirror.record_sync_outcome(
                SyncChannel.STATUS_WEBHOOK,
                SyncStats(errors=1, total=1),
                lastOrderId=order_id,
                lastError=str(e) if isinstance(e, StorefrontError) else f"{type(e).__name__}: {e}",
            )
            raise

        await self._mirror.record_sync_outcome(
            SyncChannel.STATUS_WEBHOOK,
            SyncStats(updated=1 if applied else 0, total=1),
            lastOrderId=order_id,
            lastStatus=status.value,
        )
        return RemoteStatusChange(
            order_id=order_id,
            new_status=status,
            old_status=previous_status,
            applied=applied,
        )
