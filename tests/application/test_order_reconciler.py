"""Application tests for the order store <-> content mirror reconciliation."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio

from core.application.services import IgnoredWebhook, OrderReconciler
from core.domain.entities import OrderItem
from core.domain.enums import OrderStatus
from core.domain.exceptions import ContentMirrorError, OrderNotFoundError, ValidationError
from core.domain.value_objects import MirrorDocumentId, to_iso8601
from tests.conftest import FAST_RETRY, load_order, seed_address, seed_order, seed_product, seed_user


@pytest.fixture
def reconciler(test_session_factory, content_mirror) -> OrderReconciler:
    return OrderReconciler(test_session_factory, content_mirror, FAST_RETRY)


@pytest_asyncio.fixture
async def customer(test_session_factory):
    await seed_product(test_session_factory, product_id="prod-tee", slug="grail-tee", name="Grail Tee")
    await seed_product(test_session_factory, product_id="prod-mug", slug="grail-mug", name="Grail Mug", price="4.50")
    return await seed_user(test_session_factory)


def _doc_id(order) -> str:
    return MirrorDocumentId.for_order(order.id).value


def _mirror_order(user_id: str, order_id: str = "remote-1", **fields) -> dict:
    document = {
        "_type": "order",
        "_id": f"order-{order_id}",
        "orderNumber": "ORD-1700000000000-remote",
        "userId": user_id,
        "total": 9.0,
        "status": "PROCESSING",
        "items": [
            {"_key": "item-r1", "itemId": "r1", "productId": "prod-mug", "quantity": 2, "price": 4.5},
        ],
        "createdAt": "2024-02-01T09:30:00.000Z",
    }
    document.update(fields)
    return document


# =============================================================================
# PUSH
# =============================================================================

@pytest.mark.asyncio
async def test_push_creates_then_updates(reconciler, content_mirror, test_session_factory, customer):
    address = await seed_address(test_session_factory, customer)
    order = await seed_order(test_session_factory, customer, shipping_address=address)

    first = await reconciler.export_orders()
    second = await reconciler.export_orders()

    assert (first.created, first.updated, first.errors, first.total) == (1, 0, 0, 1)
    assert (second.created, second.updated, second.errors, second.total) == (0, 1, 0, 1)

    document = content_mirror.documents[_doc_id(order)]
    assert document["orderNumber"] == order.order_number
    assert document["customerEmail"] == "ada@example.com"
    assert document["customerName"] == "Ada Lovelace"
    assert document["status"] == "PROCESSING"
    assert document["total"] == 20.0
    assert document["items"][0]["name"] == "Grail Tee"
    assert document["items"][0]["price"] == 10.0
    assert document["shippingAddress"]["postalCode"] == "62701"
    assert document["createdAt"].endswith("Z")

    state = content_mirror.sync_states["order-sync-state"]
    assert state["syncStatus"] == "success"
    assert state["syncStats"]["updated"] == 1


@pytest.mark.asyncio
async def test_push_continues_after_one_failure(reconciler, content_mirror, test_session_factory, customer):
    """Three orders, the second write fails: 2 created, 1 error, batch finishes."""
    orders = [await seed_order(test_session_factory, customer, intent_id=f"pi_{n}") for n in range(3)]
    content_mirror.failing_ids.add(_doc_id(orders[1]))

    stats = await reconciler.export_orders()

    assert (stats.created, stats.updated, stats.errors, stats.total) == (2, 0, 1, 3)
    assert _doc_id(orders[1]) not in content_mirror.documents
    state = content_mirror.sync_states["order-sync-state"]
    assert state["syncStatus"] == "failed"
    assert state["syncStats"]["errors"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("order_count", [3, 4])
async def test_push_walks_every_page(test_session_factory, content_mirror, customer, order_count):
    orders = [
        await seed_order(test_session_factory, customer, intent_id=f"pi_{n}") for n in range(order_count)
    ]
    reconciler = OrderReconciler(test_session_factory, content_mirror, FAST_RETRY, export_limit=2)

    first = await reconciler.export_orders()
    second = await reconciler.export_orders()

    assert (first.created, first.errors, first.total) == (order_count, 0, order_count)
    assert (second.created, second.updated, second.total) == (0, order_count, order_count)
    assert {_doc_id(order) for order in orders} <= set(content_mirror.documents)
    assert content_mirror.sync_states["order-sync-state"]["syncStats"]["total"] == order_count


# =============================================================================
# PULL
# =============================================================================

@pytest.mark.asyncio
async def test_pull_creates_order_from_mirror(reconciler, content_mirror, test_session_factory, customer):
    content_mirror.put(_mirror_order(customer.id))

    stats = await reconciler.import_orders()

    assert (stats.created, stats.updated, stats.errors, stats.total) == (1, 0, 0, 1)
    order = await load_order(test_session_factory, "remote-1")
    assert order.status == OrderStatus.PROCESSING
    assert order.total == Decimal("9.00")
    assert order.order_number == "ORD-1700000000000-remote"
    assert order.created_at == datetime(2024, 2, 1, 9, 30)
    assert [(i.id, i.product_id, i.quantity, i.price) for i in order.items] == [
        ("r1", "prod-mug", 2, Decimal("4.50"))
    ]
    assert content_mirror.sync_states["sanity-to-db-sync-state"]["syncStatus"] == "success"


@pytest.mark.asyncio
async def test_pull_coerces_unknown_status(reconciler, content_mirror, test_session_factory, customer):
    """An editor-invented REFUNDED status lands as PENDING."""
    order = await seed_order(test_session_factory, customer, status=OrderStatus.DELIVERED)
    await reconciler.export_orders()
    document = content_mirror.documents[_doc_id(order)]
    document["status"] = "REFUNDED"

    stats = await reconciler.import_orders()

    assert (stats.updated, stats.errors) == (1, 0)
    assert (await load_order(test_session_factory, order.id)).status == OrderStatus.PENDING


@pytest.mark.asyncio
async def test_pull_replaces_items(reconciler, content_mirror, test_session_factory, customer):
    order = await seed_order(
        test_session_factory,
        customer,
        items=[
            OrderItem(product_id="prod-tee", quantity=1, price=Decimal("10.00")),
            OrderItem(product_id="prod-mug", quantity=1, price=Decimal("4.50")),
        ],
    )
    await reconciler.export_orders()
    document = content_mirror.documents[_doc_id(order)]
    document["items"] = [{"_key": "item-x", "itemId": "x", "productId": "prod-mug", "quantity": 3, "price": 4.5}]
    document["total"] = 13.5

    await reconciler.import_orders()

    stored = await load_order(test_session_factory, order.id)
    assert [(i.id, i.quantity) for i in stored.items] == [("x", 3)]
    assert stored.total == Decimal("13.50")


@pytest.mark.asyncio
async def test_push_then_pull_round_trip(reconciler, content_mirror, test_session_factory, customer):
    """Pulling right after a push leaves every order unchanged."""
    order = await seed_order(
        test_session_factory,
        customer,
        items=[
            OrderItem(product_id="prod-tee", quantity=2, price=Decimal("10.00")),
            OrderItem(product_id="prod-mug", quantity=1, price=Decimal("4.50")),
        ],
    )
    before = await load_order(test_session_factory, order.id)

    await reconciler.export_orders()
    stats = await reconciler.import_orders()
    after = await load_order(test_session_factory, order.id)

    assert (stats.created, stats.updated, stats.errors) == (0, 1, 0)
    assert after.id == before.id
    assert after.status == before.status
    assert after.total == before.total
    assert after.order_number == before.order_number
    assert after.stripe_payment_intent_id == before.stripe_payment_intent_id
    assert sorted((i.id, i.product_id, i.quantity, i.price) for i in after.items) == sorted(
        (i.id, i.product_id, i.quantity, i.price) for i in before.items
    )


@pytest.mark.asyncio
async def test_pull_skips_malformed_documents(reconciler, content_mirror, test_session_factory, customer):
    """Bad documents are counted; the good one is still applied."""
    content_mirror.put(_mirror_order(customer.id, order_id="good"))
    content_mirror.put(_mirror_order(customer.id, order_id="bad-item", items=[{"quantity": 1, "price": 1}]))
    content_mirror.put(_mirror_order(customer.id, order_id="bad-qty", items=[{"productId": "prod-mug", "quantity": 0, "price": 1}]))
    content_mirror.put(_mirror_order("", order_id="no-user"))
    content_mirror.put({"_type": "order", "_id": "drafts.something", "status": "PENDING"})

    stats = await reconciler.import_orders()

    assert (stats.created, stats.updated, stats.errors, stats.total) == (1, 0, 4, 5)
    assert await load_order(test_session_factory, "good") is not None
    assert await load_order(test_session_factory, "bad-item") is None
    assert await load_order(test_session_factory, "bad-qty") is None
    assert content_mirror.sync_states["sanity-to-db-sync-state"]["syncStatus"] == "failed"


@pytest.mark.asyncio
async def test_pull_with_unreadable_mirror_raises(reconciler, content_mirror):
    content_mirror.fail_reads = True
    with pytest.raises(ContentMirrorError):
        await reconciler.import_orders()


# =============================================================================
# STATUS WEBHOOK
# =============================================================================

def _webhook(document_id: str, **fields) -> dict:
    event = {
        "_id": document_id,
        "_type": "order",
        "transition": "update",
        "changedFields": ["status"],
        "previousValue": {"status": "PROCESSING"},
    }
    event.update(fields)
    return event


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fields, reason",
    [
        ({"_type": "product"}, "Not an order webhook"),
        ({"transition": "create"}, "Not an update webhook"),
        ({"changedFields": ["customerName"]}, "Status not changed"),
        ({"changedFields": None}, "Status not changed"),
    ],
)
async def test_irrelevant_webhooks_are_ignored(reconciler, content_mirror, fields, reason):
    result = await reconciler.on_remote_order_updated(_webhook("order-abc", **fields))

    assert isinstance(result, IgnoredWebhook)
    assert result.reason == reason
    assert content_mirror.sync_states == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("document_id", ["drafts.order-abc", "order-", ""])
async def test_draft_and_foreign_documents_are_ignored(reconciler, content_mirror, document_id):
    content_mirror.put({"_type": "order", "_id": "drafts.order-abc", "status": "SHIPPED"})

    result = await reconciler.on_remote_order_updated(_webhook(document_id))

    assert isinstance(result, IgnoredWebhook)
    assert result.reason == "Not an order document"
    assert content_mirror.sync_states == {}


@pytest.mark.asyncio
async def test_status_webhook_applies_current_document(reconciler, content_mirror, test_session_factory, customer):
    order = await seed_order(test_session_factory, customer, status=OrderStatus.PROCESSING)
    await reconciler.export_orders()
    content_mirror.documents[_doc_id(order)]["status"] = "SHIPPED"

    result = await reconciler.on_remote_order_updated(_webhook(_doc_id(order)))

    assert result.applied is True
    assert result.order_id == order.id
    assert result.old_status == "PROCESSING"
    assert result.new_status == OrderStatus.SHIPPED
    stored = await load_order(test_session_factory, order.id)
    assert stored.status == OrderStatus.SHIPPED
    assert stored.status_changed_at is not None

    state = content_mirror.sync_states["webhook-order-status-sync"]
    assert state["syncStatus"] == "success"
    assert state["lastOrderId"] == order.id
    assert state["lastStatus"] == "SHIPPED"


@pytest.mark.asyncio
async def test_status_webhook_trusts_document_not_payload(reconciler, content_mirror, test_session_factory, customer):
    order = await seed_order(test_session_factory, customer, status=OrderStatus.PROCESSING)
    content_mirror.put({"_type": "order", "_id": _doc_id(order), "status": "DELIVERED"})

    result = await reconciler.on_remote_order_updated(_webhook(_doc_id(order), status="CANCELLED"))

    assert result.new_status == OrderStatus.DELIVERED
    assert (await load_order(test_session_factory, order.id)).status == OrderStatus.DELIVERED


@pytest.mark.asyncio
async def test_status_webhook_ignores_stale_document(reconciler, content_mirror, test_session_factory, customer):
    order = await seed_order(test_session_factory, customer, status=OrderStatus.PENDING)
    edited_at = datetime(2024, 3, 1, 12, 0, 0)
    content_mirror.put(
        {"_type": "order", "_id": _doc_id(order), "status": "SHIPPED"},
        updated_at=to_iso8601(edited_at),
    )
    assert (await reconciler.apply_remote_status_change(_doc_id(order))).applied is True

    content_mirror.put(
        {"_type": "order", "_id": _doc_id(order), "status": "CANCELLED"},
        updated_at=to_iso8601(edited_at - timedelta(minutes=1)),
    )
    result = await reconciler.apply_remote_status_change(_doc_id(order))

    assert result.applied is False
    stored = await load_order(test_session_factory, order.id)
    assert stored.status == OrderStatus.SHIPPED
    assert stored.status_changed_at == edited_at


@pytest.mark.asyncio
async def test_status_webhook_for_missing_mirror_document(reconciler):
    with pytest.raises(OrderNotFoundError):
        await reconciler.apply_remote_status_change("order-nowhere")


@pytest.mark.asyncio
async def test_status_webhook_for_missing_local_order_records_failure(reconciler, content_mirror):
    content_mirror.put({"_type": "order", "_id": "order-ghost", "status": "SHIPPED"})

    with pytest.raises(OrderNotFoundError):
        await reconciler.apply_remote_status_change("order-ghost")

    state = content_mirror.sync_states["webhook-order-status-sync"]
    assert state["syncStatus"] == "failed"
    assert state["lastOrderId"] == "ghost"
    assert "ghost" in state["lastError"]


@pytest.mark.asyncio
async def test_status_webhook_rejects_non_order_id(reconciler):
    with pytest.raises(ValidationError):
        await reconciler.apply_remote_status_change("product-123")
