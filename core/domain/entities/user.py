"""User and address entities."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid

from ..value_objects import utc_now


@dataclass
class User:
    """Customer account. `firebase_uid` links it to the auth provider."""
    email: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    name: Optional[str] = None
    firebase_uid: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class Address:
    """Postal address in a user's address book."""
    user_id: str
    street: str
    city: str
    state: str
    postal_code: str
    country: str
    is_default: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def parse_shipping_line(cls, user_id: str, value: Optional[str]) -> Optional["Address"]:
        """
        Parse "street, city, state, postal code, country".

        Returns None when fewer than five comma-separated parts are present.
        """
        if not value:
            return None
        parts = [part.strip() for part in value.split(",")]
        if len(parts) < 5:
            return None
        return cls(
            user_id=user_id,
            street=parts[0],
            city=parts[1],
            state=parts[2],
            postal_code=parts[3],
            country=parts[4],
        )
