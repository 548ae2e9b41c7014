"""
Order aggregate root.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
import logging
from typing import Iterable, List, Optional
import uuid

from ..enums import OrderStatus
from ..value_objects import OrderNumber, utc_now
from .user import Address


logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_amount(value) -> Decimal:
    """Convert a price/total to a 2-place Decimal (never via float arithmetic)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class OrderItem:
    """
    Line item within an order.

    `price` is the unit price captured at order time and stays fixed even if
    the catalog price changes later.
    """
    product_id: str
    quantity: int
    price: Decimal
    variant_id: Optional[str] = None
    id: Optional[str] = None

    # Read side only (joined from the product when loaded)
    product_name: Optional[str] = None

    def __post_init__(self):
        if not self.product_id:
            raise ValueError("Order item needs a product id")
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity <= 0:
            raise ValueError(f"Quantity must be a positive integer, got {self.quantity!r}")
        self.price = to_amount(self.price)
        if self.price < 0:
            raise ValueError(f"Price cannot be negative: {self.price}")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass
class Order:
    """
    Order aggregate root.

    The order store is authoritative; the content mirror and payment
    webhooks feed status changes into it through `apply_status`.
    """
    id: str
    order_number: str
    user_id: str
    total: Decimal
    status: OrderStatus = OrderStatus.PENDING
    items: List[OrderItem] = field(default_factory=list)
    stripe_payment_intent_id: Optional[str] = None
    shipping_address_id: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    # Timestamp of the external event that produced the current status
    status_changed_at: Optional[datetime] = None
    revision: int = 0

    # Read side only (joined when loaded)
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    shipping_address: Optional[Address] = None

    def __post_init__(self):
        self.total = to_amount(self.total)
        self.status = OrderStatus.coerce(self.status)

    @classmethod
    def create(
        cls,
        user_id: str,
        items: Iterable[OrderItem],
        status: OrderStatus = OrderStatus.PENDING,
        stripe_payment_intent_id: Optional[str] = None,
        shipping_address_id: Optional[str] = None,
        order_id: Optional[str] = None,
    ) -> "Order":
        """
        Factory for a brand-new order.

        The total is always computed from the items.
        """
        items = list(items)
        now = utc_now()
        order = cls(
            id=order_id or str(uuid.uuid4()),
            order_number=OrderNumber.generate().value,
            user_id=user_id,
            total=Decimal("0"),
            status=status,
            items=items,
            stripe_payment_intent_id=stripe_payment_intent_id,
            shipping_address_id=shipping_address_id,
            created_at=now,
            updated_at=now,
        )
        order.recalculate_total()
        return order

    def recalculate_total(self) -> Decimal:
        self.total = to_amount(sum((item.line_total for item in self.items), Decimal("0")))
        return self.total

    def apply_status(self, status, occurred_at: Optional[datetime] = None) -> bool:
        """
        Apply a status coming from any channel.

        The value is coerced into the closed set first. If the event carries
        a timestamp older than the one that produced the current status it is
        stale and ignored. Events without a timestamp always apply and do not
        move the watermark.

        Returns:
            True if the status was applied (even when unchanged), False if
            the event was refused as stale.
        """
        new_status = OrderStatus.coerce(status)

        if (
            occurred_at is not None
            and self.status_changed_at is not None
            and occurred_at < self.status_changed_at
        ):
            logger.warning(
                f"Ignoring stale status {new_status.value} for order {self.id}: "
                f"event at {occurred_at.isoformat()} is older than "
                f"{self.status_changed_at.isoformat()}"
            )
            return False

        if new_status != self.status:
            logger.info(f"Order {self.id} status {self.status.value} -> {new_status.value}")
        self.status = new_status

        if occurred_at is not None:
            self.status_changed_at = occurred_at

        self.updated_at = utc_now()
        return True

    def replace_items(self, items: Iterable[OrderItem]) -> None:
        """Full replace of the line items (used by the pull sync)."""
        self.items = list(items)
        self.updated_at = utc_now()
