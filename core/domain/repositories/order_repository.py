"""Repository interfaces for Order aggregate."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from ..entities.order import Order, OrderItem


class OrderRepository(ABC):
    """Abstract repository for Order aggregate persistence."""

    @abstractmethod
    async def add(self, order: Order) -> None:
        """Insert a new order together with its items.

        Args:
            order: Order aggregate to persist
        """
        pass

    @abstractmethod
    async def save(self, order: Order) -> None:
        """Write the order's mutable fields back (items untouched).

        Args:
            order: Order aggregate previously loaded from this repository
        """
        pass

    @abstractmethod
    async def find_by_id(self, order_id: str) -> Optional[Order]:
        """Retrieve order by unique identifier.

        Args:
            order_id: Local order id

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        """Retrieve the order created for a payment intent.

        Args:
            payment_intent_id: Stripe payment intent id

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str) -> List[Order]:
        """List a user's orders, newest first."""
        pass

    @abstractmethod
    async def find_all(
        self,
        limit: int = 1000,
        after: Optional[Tuple[datetime, str]] = None,
    ) -> List[Order]:
        """List orders by last modification, newest first (ties by id, descending).

        Args:
            limit: Maximum number of orders to return
            after: Keyset cursor `(updated_at, id)` of the last order of the
                previous page; only orders sorting after it are returned

        Returns:
            List of Order aggregates with user and product names joined
        """
        pass

    @abstractmethod
    async def replace_items(self, order_id: str, items: List[OrderItem]) -> None:
        """Delete all items of an order and insert the given ones."""
        pass
