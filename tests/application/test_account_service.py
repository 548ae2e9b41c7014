"""Application tests for accounts, address books and order history."""

import pytest

from core.application.dtos import CreateAddressRequest
from core.application.interfaces import AuthenticatedPrincipal
from core.application.services import AccountService, OrderApplicationService
from core.data.uow import create_uow
from core.domain.exceptions import AddressNotFoundError, OrderNotFoundError, UserNotFoundError, ValidationError
from tests.conftest import FAST_RETRY, seed_address, seed_order, seed_user


ADA = AuthenticatedPrincipal(uid="uid-ada", email="ada@example.com", name="Ada Lovelace")
BOB = AuthenticatedPrincipal(uid="uid-bob", email="bob@example.com")


@pytest.fixture
def accounts(test_session_factory) -> AccountService:
    return AccountService(test_session_factory, FAST_RETRY)


def _address_request(**overrides) -> CreateAddressRequest:
    payload = {
        "street": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "postalCode": "62701",
        "country": "US",
        "isDefault": False,
    }
    payload.update(overrides)
    return CreateAddressRequest.model_validate(payload)


async def _defaults(session_factory, user_id: str):
    async with create_uow(session_factory) as uow:
        return [a.id for a in await uow.addresses.find_for_user(user_id) if a.is_default]


# =============================================================================
# USERS
# =============================================================================

@pytest.mark.asyncio
async def test_sync_user_creates_account(accounts):
    user = await accounts.sync_user(BOB)

    assert user.email == "bob@example.com"
    assert user.name == "bob"
    assert user.firebase_uid == "uid-bob"
    assert (await accounts.get_user(BOB)).id == user.id


@pytest.mark.asyncio
async def test_sync_user_links_existing_account(accounts, test_session_factory):
    existing = await seed_user(test_session_factory, firebase_uid=None)

    user = await accounts.sync_user(ADA)

    assert user.id == existing.id
    assert user.firebase_uid == "uid-ada"


@pytest.mark.asyncio
async def test_sync_user_is_idempotent(accounts):
    first = await accounts.sync_user(ADA)
    second = await accounts.sync_user(ADA)
    assert first.id == second.id


@pytest.mark.asyncio
async def test_sync_user_requires_email(accounts):
    with pytest.raises(ValidationError):
        await accounts.sync_user(AuthenticatedPrincipal(uid="uid-anon"))


@pytest.mark.asyncio
async def test_unknown_user(accounts):
    with pytest.raises(UserNotFoundError):
        await accounts.get_user(BOB)


# =============================================================================
# ADDRESSES
# =============================================================================

@pytest.mark.asyncio
async def test_at_most_one_default_address(accounts, test_session_factory):
    user = await seed_user(test_session_factory)

    first = await accounts.create_address(ADA, _address_request(isDefault=True))
    second = await accounts.create_address(ADA, _address_request(street="2 Elm St", isDefault=True))
    assert await _defaults(test_session_factory, user.id) == [second.id]

    await accounts.set_default_address(ADA, first.id)
    assert await _defaults(test_session_factory, user.id) == [first.id]

    listed = await accounts.list_addresses(ADA)
    assert [a.id for a in listed][0] == first.id
    assert len(listed) == 2


@pytest.mark.asyncio
async def test_non_default_address_keeps_existing_default(accounts, test_session_factory):
    user = await seed_user(test_session_factory)
    default = await accounts.create_address(ADA, _address_request(isDefault=True))

    await accounts.create_address(ADA, _address_request(street="2 Elm St"))

    assert await _defaults(test_session_factory, user.id) == [default.id]


@pytest.mark.asyncio
async def test_create_address_requires_all_fields(accounts, test_session_factory):
    await seed_user(test_session_factory)

    with pytest.raises(ValidationError):
        await accounts.create_address(ADA, _address_request(city="  "))
    with pytest.raises(ValidationError):
        await accounts.create_address(ADA, _address_request(postalCode=None))


@pytest.mark.asyncio
async def test_other_users_address_is_not_found(accounts, test_session_factory):
    await seed_user(test_session_factory)
    bob = await seed_user(test_session_factory, email="bob@example.com", name="Bob", firebase_uid="uid-bob")
    bobs_address = await seed_address(test_session_factory, bob, is_default=True)

    with pytest.raises(AddressNotFoundError):
        await accounts.get_address(ADA, bobs_address.id)
    with pytest.raises(AddressNotFoundError):
        await accounts.set_default_address(ADA, bobs_address.id)

    assert await _defaults(test_session_factory, bob.id) == [bobs_address.id]


# =============================================================================
# ORDER HISTORY
# =============================================================================

@pytest.mark.asyncio
async def test_order_history_is_scoped_to_user(test_session_factory):
    ada = await seed_user(test_session_factory)
    bob = await seed_user(test_session_factory, email="bob@example.com", firebase_uid="uid-bob")
    adas = await seed_order(test_session_factory, ada, intent_id="pi_ada")
    bobs = await seed_order(test_session_factory, bob, intent_id="pi_bob")
    orders = OrderApplicationService(test_session_factory, FAST_RETRY)

    assert [o.id for o in await orders.list_for_user(ada.id)] == [adas.id]
    assert (await orders.get_for_user(ada.id, adas.id)).total == adas.total
    with pytest.raises(OrderNotFoundError):
        await orders.get_for_user(ada.id, bobs.id)
    with pytest.raises(OrderNotFoundError):
        await orders.get_for_user(ada.id, "missing")
