"""SQLAlchemy implementation of OrderRepository."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.domain.entities import Order, OrderItem
from core.domain.repositories import OrderRepository
from core.domain.value_objects import utc_now

from ..mappers import OrderItemMapper, OrderMapper
from ..models import OrderItemModel, OrderModel


logger = logging.getLogger(__name__)


def _with_details(statement):
    """Eager-load everything the domain aggregate exposes."""
    return statement.options(
        selectinload(OrderModel.items).selectinload(OrderItemModel.product),
        selectinload(OrderModel.user),
        selectinload(OrderModel.shipping_address),
    ).execution_options(populate_existing=True)


class SqlAlchemyOrderRepository(OrderRepository):
    """Concrete implementation of OrderRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with SQLAlchemy session.

        Args:
            session: SQLAlchemy async session
        """
        self._session = session

    async def _get_model(self, order_id: str) -> Optional[OrderModel]:
        result = await self._session.execute(
            _with_details(select(OrderModel).where(OrderModel.id == order_id))
        )
        return result.scalar_one_or_none()

    async def add(self, order: Order) -> None:
        self._session.add(OrderMapper.to_persistence(order))
        await self._session.flush()  # Propagate to DB without committing
        logger.info(f"Inserted order {order.id} ({order.order_number}) with {len(order.items)} items")

    async def save(self, order: Order) -> None:
        model = await self._session.get(OrderModel, order.id)
        if model is None:
            await self.add(order)
            return
        OrderMapper.update_persistence(order, model)
        await self._session.flush()
        order.revision = model.revision

    async def find_by_id(self, order_id: str) -> Optional[Order]:
        model = await self._get_model(order_id)
        return OrderMapper.to_domain(model) if model else None

    async def find_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Order]:
        if not payment_intent_id:
            return None
        result = await self._session.execute(
            _with_details(
                select(OrderModel).where(
                    OrderModel.stripe_payment_intent_id == payment_intent_id
                )
            )
        )
        model = result.scalar_one_or_none()
        return OrderMapper.to_domain(model) if model else None

    async def find_by_user(self, user_id: str) -> List[Order]:
        result = await self._session.execute(
            _with_details(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc())
            )
        )
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def find_all(
        self,
        limit: int = 1000,
        after: Optional[Tuple[datetime, str]] = None,
    ) -> List[Order]:
        statement = select(OrderModel)
        if after is not None:
            updated_at, order_id = after
            statement = statement.where(
                or_(
                    OrderModel.updated_at < updated_at,
                    and_(OrderModel.updated_at == updated_at, OrderModel.id < order_id),
                )
            )
        statement = statement.order_by(OrderModel.updated_at.desc(), OrderModel.id.desc()).limit(limit)
        result = await self._session.execute(_with_details(statement))
        return [OrderMapper.to_domain(model) for model in result.scalars().all()]

    async def replace_items(self, order_id: str, items: List[OrderItem]) -> None:
        model = await self._get_model(order_id)
        if model is None:
            raise LookupError(f"Order {order_id} does not exist")

        # Old rows must be gone before new rows (possibly reusing ids) are inserted
        model.items.clear()
        await self._session.flush()

        model.items.extend(
            OrderItemMapper.to_persistence(item, order_id, position)
            for position, item in enumerate(items)
        )
        model.updated_at = utc_now()
        await self._session.flush()
        logger.debug(f"Replaced items of order {order_id} ({len(items)} items)")
