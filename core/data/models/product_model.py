"""SQLAlchemy ORM models for the product catalog."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    slug = Column(String(255), unique=True, nullable=False)
    name = Column(String(500), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=True)
    images = Column(JSON, nullable=False, default=list)
    in_stock = Column(Boolean, nullable=False, default=True)

    variants = relationship(
        "ProductVariantModel", back_populates="product", cascade="all, delete-orphan"
    )


class ProductVariantModel(Base):
    """SQLAlchemy ORM model for product_variants table."""

    __tablename__ = "product_variants"

    id = Column(String(64), primary_key=True)
    product_id = Column(String(64), ForeignKey("products.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    stock = Column(Integer, nullable=False, default=0)

    product = relationship("ProductModel", back_populates="variants")
