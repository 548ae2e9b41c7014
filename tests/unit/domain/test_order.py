"""Unit tests for the Order aggregate and OrderStatus coercion."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from core.domain.entities import Order, OrderItem
from core.domain.enums import OrderStatus


def _order(**overrides) -> Order:
    items = overrides.pop(
        "items",
        [
            OrderItem(product_id="prod-a", quantity=2, price=Decimal("10.00")),
            OrderItem(product_id="prod-b", quantity=1, price=Decimal("5.50")),
        ],
    )
    return Order.create(user_id="user-1", items=items, **overrides)


# =============================================================================
# STATUS COERCION
# =============================================================================

@pytest.mark.parametrize("value", ["PENDING", "PROCESSING", "SHIPPED", "DELIVERED", "CANCELLED"])
def test_coerce_keeps_known_values(value):
    assert OrderStatus.coerce(value).value == value


@pytest.mark.parametrize("value", ["REFUNDED", "processing", "Shipped ", "", None, 42])
def test_coerce_maps_unknown_values_to_pending(value):
    """Anything outside the closed set becomes PENDING instead of failing."""
    assert OrderStatus.coerce(value) is OrderStatus.PENDING


def test_order_constructor_coerces_status():
    order = Order(id="o-1", order_number="ORD-1-abc", user_id="u-1", total="3", status="REFUNDED")
    assert order.status is OrderStatus.PENDING
    assert order.total == Decimal("3.00")


# =============================================================================
# CREATION & TOTALS
# =============================================================================

def test_create_computes_total_from_items():
    order = _order(status=OrderStatus.PROCESSING, stripe_payment_intent_id="pi_1")

    assert order.total == Decimal("25.50")
    assert order.status == OrderStatus.PROCESSING
    assert order.stripe_payment_intent_id == "pi_1"
    assert order.order_number.startswith("ORD-")
    assert order.created_at == order.updated_at
    assert order.status_changed_at is None


def test_create_uses_given_order_id():
    order = _order(order_id="fixed-id")
    assert order.id == "fixed-id"


def test_total_never_drifts_through_float_arithmetic():
    items = [OrderItem(product_id="p", quantity=3, price="0.10")]
    assert _order(items=items).total == Decimal("0.30")


def test_recalculate_total_after_replacing_items():
    order = _order()
    order.replace_items([OrderItem(product_id="prod-c", quantity=4, price=Decimal("2.25"))])
    assert order.recalculate_total() == Decimal("9.00")


@pytest.mark.parametrize("quantity", [0, -1, 1.5, True])
def test_order_item_rejects_non_positive_quantity(quantity):
    with pytest.raises(ValueError):
        OrderItem(product_id="prod-a", quantity=quantity, price=Decimal("1.00"))


def test_order_item_rejects_negative_price():
    with pytest.raises(ValueError):
        OrderItem(product_id="prod-a", quantity=1, price=Decimal("-0.01"))


def test_order_item_requires_product():
    with pytest.raises(ValueError):
        OrderItem(product_id="", quantity=1, price=Decimal("1.00"))


# =============================================================================
# STATUS TRANSITIONS
# =============================================================================

def test_apply_status_without_timestamp_always_applies():
    order = _order(status=OrderStatus.PROCESSING)
    order.status_changed_at = datetime(2030, 1, 1)

    assert order.apply_status("SHIPPED") is True
    assert order.status == OrderStatus.SHIPPED
    # Watermark untouched by untimed changes
    assert order.status_changed_at == datetime(2030, 1, 1)


def test_apply_status_is_idempotent():
    order = _order(status=OrderStatus.PROCESSING)
    at = datetime(2024, 5, 1, 12, 0, 0)

    assert order.apply_status(OrderStatus.PROCESSING, at) is True
    first = (order.status, order.status_changed_at)
    assert order.apply_status(OrderStatus.PROCESSING, at) is True

    assert (order.status, order.status_changed_at) == first


def test_apply_status_refuses_older_event():
    order = _order(status=OrderStatus.PENDING)
    newer = datetime(2024, 5, 1, 12, 0, 0)
    older = newer - timedelta(minutes=5)

    assert order.apply_status(OrderStatus.SHIPPED, newer) is True
    assert order.apply_status(OrderStatus.CANCELLED, older) is False

    assert order.status == OrderStatus.SHIPPED
    assert order.status_changed_at == newer


def test_apply_status_accepts_event_with_same_timestamp():
    order = _order()
    at = datetime(2024, 5, 1, 12, 0, 0)
    order.apply_status(OrderStatus.PROCESSING, at)

    assert order.apply_status(OrderStatus.SHIPPED, at) is True
    assert order.status == OrderStatus.SHIPPED


def test_apply_status_coerces_unknown_value():
    order = _order(status=OrderStatus.DELIVERED)
    assert order.apply_status("REFUNDED") is True
    assert order.status == OrderStatus.PENDING
