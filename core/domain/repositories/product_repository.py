"""Repository interface for the product catalog."""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.product import Product


class ProductRepository(ABC):
    """Abstract repository for catalog lookups used during checkout."""

    @abstractmethod
    async def find_by_reference(
        self,
        reference: Optional[str],
        original_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[Product]:
        """Resolve a client-side product reference.

        Tries slug, then id, then `original_id`, then exact name.
        """
        pass

    @abstractmethod
    async def add(self, product: Product) -> None:
        pass

    @abstractmethod
    async def decrement_variant_stock(self, variant_id: str, quantity: int) -> None:
        pass
