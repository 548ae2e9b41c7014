"""SQLAlchemy implementations of the user and address repositories."""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.entities import Address, User
from core.domain.repositories import AddressRepository, UserRepository

from ..mappers import AddressMapper, UserMapper
from ..models import AddressModel, UserModel


class SqlAlchemyUserRepository(UserRepository):
    """Concrete implementation of UserRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _find_one(self, *criteria) -> Optional[User]:
        result = await self._session.execute(select(UserModel).where(*criteria))
        model = result.scalar_one_or_none()
        return UserMapper.to_domain(model) if model else None

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await self._find_one(UserModel.id == user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._find_one(UserModel.email == email)

    async def find_by_firebase_uid(self, firebase_uid: str) -> Optional[User]:
        return await self._find_one(UserModel.firebase_uid == firebase_uid)

    async def add(self, user: User) -> None:
        self._session.add(UserMapper.to_persistence(user))
        await self._session.flush()

    async def save(self, user: User) -> None:
        model = await self._session.get(UserModel, user.id)
        if model is None:
            await self.add(user)
            return
        model.email = user.email
        model.name = user.name
        model.firebase_uid = user.firebase_uid
        await self._session.flush()


class SqlAlchemyAddressRepository(AddressRepository):
    """Concrete implementation of AddressRepository using SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_for_user(self, user_id: str) -> List[Address]:
        result = await self._session.execute(
            select(AddressModel)
            .where(AddressModel.user_id == user_id)
            .order_by(AddressModel.is_default.desc(), AddressModel.created_at.desc())
        )
        return [AddressMapper.to_domain(model) for model in result.scalars().all()]

    async def find_owned(self, address_id: str, user_id: str) -> Optional[Address]:
        result = await self._session.execute(
            select(AddressModel).where(
                AddressModel.id == address_id,
                AddressModel.user_id == user_id,
            )
        )
        model = result.scalar_one_or_none()
        return AddressMapper.to_domain(model) if model else None

    async def add(self, address: Address) -> None:
        self._session.add(AddressMapper.to_persistence(address))
        await self._session.flush()

    async def clear_default(self, user_id: str) -> int:
        result = await self._session.execute(
            update(AddressModel)
            .where(AddressModel.user_id == user_id, AddressModel.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def set_default(self, address_id: str) -> None:
        await self._session.execute(
            update(AddressModel)
            .where(AddressModel.id == address_id)
            .values(is_default=True)
            .execution_options(synchronize_session="fetch")
        )
