"""Application service for user accounts and address books."""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import CreateAddressRequest
from core.application.interfaces import AuthenticatedPrincipal
from core.data.uow import UnitOfWork, run_in_transaction
from core.domain.entities import Address, User
from core.domain.exceptions import AddressNotFoundError, UserNotFoundError, ValidationError
from core.infrastructure.retry import NO_RETRY, RetryPolicy


logger = logging.getLogger(__name__)


async def resolve_or_provision_user(
    uow: UnitOfWork,
    firebase_uid: Optional[str],
    email: Optional[str],
    name: Optional[str] = None,
) -> User:
    """
    Find the account behind a checkout, creating it when none exists.

    Lookup order: auth subject id, then email, then create. A user found by
    email gets the auth subject attached when it has none yet. Runs inside
    the caller's transaction, so a retried transaction cannot create the
    user twice.

    Raises:
        ValidationError: If neither an auth subject nor an email is given
    """
    user = None
    if firebase_uid:
        user = await uow.users.find_by_firebase_uid(firebase_uid)

    if user is None and email:
        user = await uow.users.find_by_email(email)
        if user is not None and firebase_uid and not user.firebase_uid:
            user.firebase_uid = firebase_uid
            await uow.users.save(user)

    if user is None:
        if not email:
            raise ValidationError("Could not identify user for this order")
        user = User(email=email, name=name or None, firebase_uid=firebase_uid or None)
        await uow.users.add(user)
        logger.info(f"Provisioned user {user.id} for {email}")

    return user


class AccountService:
    """
    Users and their address books.

    Ownership is always taken from the verified token, never from the
    request body.
    """

    def __init__(self, session_factory: async_sessionmaker, retry_policy: RetryPolicy = NO_RETRY) -> None:
        self._session_factory = session_factory
        self._retry_policy = retry_policy

    async def sync_user(self, principal: AuthenticatedPrincipal) -> User:
        """Upsert the account for a signed-in user (keyed by email)."""
        if not principal.email:
            raise ValidationError("Email is required")

        async def work(uow: UnitOfWork) -> User:
            user = await uow.users.find_by_email(principal.email)
            if user is None:
                user = User(
                    email=principal.email,
                    name=principal.name or principal.email.split("@")[0],
                    firebase_uid=principal.uid,
                )
                await uow.users.add(user)
                logger.info(f"Created user {user.id} for {principal.email}")
            elif not user.firebase_uid:
                user.firebase_uid = principal.uid
                await uow.users.save(user)
                logger.info(f"Linked user {user.id} to auth subject")
            return user

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "sync user")

    async def get_user(self, principal: AuthenticatedPrincipal) -> User:
        async def work(uow: UnitOfWork) -> User:
            return await self._require_user(uow, principal)

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "get user")

    async def list_addresses(self, principal: AuthenticatedPrincipal) -> List[Address]:
        async def work(uow: UnitOfWork) -> List[Address]:
            user = await self._require_user(uow, principal)
            return await uow.addresses.find_for_user(user.id)

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "list addresses")

    async def get_address(self, principal: AuthenticatedPrincipal, address_id: str) -> Address:
        async def work(uow: UnitOfWork) -> Address:
            user = await self._require_user(uow, principal)
            address = await uow.addresses.find_owned(address_id, user.id)
            if address is None:
                raise AddressNotFoundError("Address not found")
            return address

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "get address")

    async def create_address(self, principal: AuthenticatedPrincipal, request: CreateAddressRequest) -> Address:
        """
        Add an address. A default address replaces the previous default in
        the same transaction.
        """
        fields = (request.street, request.city, request.state, request.postal_code, request.country)
        if not all(value and value.strip() for value in fields):
            raise ValidationError("All fields are required")

        async def work(uow: UnitOfWork) -> Address:
            user = await self._require_user(uow, principal)
            if request.is_default:
                await uow.addresses.clear_default(user.id)
            address = Address(
                user_id=user.id,
                street=request.street.strip(),
                city=request.city.strip(),
                state=request.state.strip(),
                postal_code=request.postal_code.strip(),
                country=request.country.strip(),
                is_default=bool(request.is_default),
            )
            await uow.addresses.add(address)
            return address

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "create address")

    async def set_default_address(self, principal: AuthenticatedPrincipal, address_id: str) -> None:
        """Clear every default of the user, then set one, atomically."""

        async def work(uow: UnitOfWork) -> None:
            user = await self._require_user(uow, principal)
            address = await uow.addresses.find_owned(address_id, user.id)
            if address is None:
                raise AddressNotFoundError("Address not found or does not belong to user")
            await uow.addresses.clear_default(user.id)
            await uow.addresses.set_default(address.id)

        await run_in_transaction(self._session_factory, work, self._retry_policy, "set default address")
        logger.info(f"Address {address_id} is now the default")

    @staticmethod
    async def _require_user(uow: UnitOfWork, principal: AuthenticatedPrincipal) -> User:
        user = await uow.users.find_by_firebase_uid(principal.uid)
        if user is None:
            raise UserNotFoundError("User not found")
        return user
