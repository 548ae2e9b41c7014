"""Catalog entities referenced by order items."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class ProductVariant:
    id: str
    product_id: str
    name: str = ""
    stock: int = 0


@dataclass
class Product:
    id: str
    slug: str
    name: str
    price: Decimal
    description: Optional[str] = None
    images: List[str] = field(default_factory=list)
    in_stock: bool = True
    variants: List[ProductVariant] = field(default_factory=list)

    def find_variant(self, variant_id: Optional[str]) -> Optional[ProductVariant]:
        if not variant_id:
            return None
        return next((v for v in self.variants if v.id == variant_id), None)
