"""SQLAlchemy ORM models for users and addresses."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from core.domain.value_objects import utc_now

from .base import Base


class UserModel(Base):
    """SQLAlchemy ORM model for users table."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    firebase_uid = Column(String(128), unique=True, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    addresses = relationship("AddressModel", back_populates="user")


class AddressModel(Base):
    """SQLAlchemy ORM model for addresses table."""

    __tablename__ = "addresses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    street = Column(String(500), nullable=False)
    city = Column(String(255), nullable=False)
    state = Column(String(255), nullable=False)
    postal_code = Column(String(32), nullable=False)
    country = Column(String(64), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    user = relationship("UserModel", back_populates="addresses")
