"""SQLAlchemy implementation of ProductRepository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.domain.entities import Product
from core.domain.repositories import ProductRepository

from ..mappers import ProductMapper
from ..models import ProductModel, ProductVariantModel


class SqlAlchemyProductRepository(ProductRepository):
    """Concrete implementation of ProductRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _find_one(self, criterion) -> Optional[Product]:
        result = await self._session.execute(
            select(ProductModel)
            .where(criterion)
            .options(selectinload(ProductModel.variants))
            .limit(1)
        )
        model = result.scalars().first()
        return ProductMapper.to_domain(model) if model else None

    async def find_by_reference(
        self,
        reference: Optional[str],
        original_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[Product]:
        candidates = []
        if reference:
            candidates.append(ProductModel.slug == reference)
            candidates.append(ProductModel.id == reference)
        if original_id:
            candidates.append(ProductModel.id == original_id)
        if name:
            candidates.append(ProductModel.name == name)

        for criterion in candidates:
            product = await self._find_one(criterion)
            if product is not None:
                return product
        return None

    async def add(self, product: Product) -> None:
        self._session.add(ProductMapper.to_persistence(product))
        await self._session.flush()

    async def decrement_variant_stock(self, variant_id: str, quantity: int) -> None:
        variant = await self._session.get(ProductVariantModel, variant_id)
        if variant is not None:
            variant.stock = variant.stock - quantity
            await self._session.flush()
