"""Application service for a customer's order history."""

from typing import List

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.data.uow import UnitOfWork, run_in_transaction
from core.domain.entities import Order
from core.domain.exceptions import OrderNotFoundError
from core.infrastructure.retry import NO_RETRY, RetryPolicy


class OrderApplicationService:
    """Read access to orders, always scoped to one user."""

    def __init__(self, session_factory: async_sessionmaker, retry_policy: RetryPolicy = NO_RETRY) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            retry_policy: Retry policy for transient database errors
        """
        self._session_factory = session_factory
        self._retry_policy = retry_policy

    async def list_for_user(self, user_id: str) -> List[Order]:
        """List the user's orders, newest first, with items and address."""

        async def work(uow: UnitOfWork) -> List[Order]:
            return await uow.orders.find_by_user(user_id)

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "list orders")

    async def get_for_user(self, user_id: str, order_id: str) -> Order:
        """
        Get one order of the user.

        Raises:
            OrderNotFoundError: If the order does not exist or belongs to someone else
        """

        async def work(uow: UnitOfWork) -> Order:
            order = await uow.orders.find_by_id(order_id)
            if order is None or order.user_id != user_id:
                raise OrderNotFoundError("Order not found")
            return order

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "get order")
