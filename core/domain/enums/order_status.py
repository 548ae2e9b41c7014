"""
Order Status Enum.

Closed set of order states shared by the order store, the payment webhooks
and the content mirror.
"""
from enum import Enum
import logging
from typing import Any


logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    """Order status wire values."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def coerce(cls, value: Any) -> "OrderStatus":
        """
        Map an external status value into the closed set.

        Unknown values (wrong case, typos, statuses the mirror invented such
        as "REFUNDED", None) become PENDING so a sync batch never blocks on
        them.

        Args:
            value: Raw status received from another system

        Returns:
            A member of OrderStatus
        """
        if isinstance(value, cls):
            return value

        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unrecognized order status {value!r}, coercing to PENDING")
            return cls.PENDING

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]
