"""Repository interfaces for users and their addresses."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.user import Address, User


class UserRepository(ABC):
    """Abstract repository for User persistence."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def find_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        pass

    @abstractmethod
    async def add(self, user: User) -> None:
        pass

    @abstractmethod
    async def save(self, user: User) -> None:
        pass


class AddressRepository(ABC):
    """Abstract repository for Address persistence."""

    @abstractmethod
    async def find_for_user(self, user_id: str) -> List[Address]:
        """List a user's addresses, default first, then newest."""
        pass

    @abstractmethod
    async def find_owned(self, address_id: str, user_id: str) -> Optional[Address]:
        """Fetch an address only if it belongs to the user."""
        pass

    @abstractmethod
    async def add(self, address: Address) -> None:
        pass

    @abstractmethod
    async def clear_default(self, user_id: str) -> int:
        """Unset is_default on every address of the user.

        Returns:
            Number of addresses changed
        """
        pass

    @abstractmethod
    async def set_default(self, address_id: str) -> None:
        pass
