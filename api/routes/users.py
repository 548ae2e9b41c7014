"""
Account endpoints: user sync, address book and order history.

Every route resolves the caller from the bearer token; ids in the path
are only looked up within the caller's own records.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from api.dependencies import get_account_service, get_current_principal, get_order_service
from core.application.dtos import AddressDTO, CreateAddressRequest, OrderDTO, OrderListDTO, UserDTO
from core.application.interfaces import AuthenticatedPrincipal
from core.application.services import AccountService, OrderApplicationService


logger = logging.getLogger(__name__)
router = APIRouter()


# =============================================================================
# USER
# =============================================================================

@router.post("", response_model=UserDTO)
async def sync_user(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    """Create the account for a signed-in user, or link an existing one."""
    return UserDTO.from_entity(await accounts.sync_user(principal))


@router.get("", response_model=UserDTO)
async def get_user(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    return UserDTO.from_entity(await accounts.get_user(principal))


# =============================================================================
# ORDERS
# =============================================================================

@router.get("/orders", response_model=OrderListDTO, response_model_by_alias=True)
async def list_orders(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
    orders: OrderApplicationService = Depends(get_order_service),
):
    """List the caller's orders, newest first."""
    user = await accounts.get_user(principal)
    return OrderListDTO(orders=[OrderDTO.from_entity(o) for o in await orders.list_for_user(user.id)])


@router.get("/orders/{order_id}", response_model=OrderDTO, response_model_by_alias=True)
async def get_order(
    order_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
    orders: OrderApplicationService = Depends(get_order_service),
):
    user = await accounts.get_user(principal)
    return OrderDTO.from_entity(await orders.get_for_user(user.id, order_id))


# =============================================================================
# ADDRESSES
# =============================================================================

@router.get("/addresses", response_model=List[AddressDTO], response_model_by_alias=True)
async def list_addresses(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    """Default address first, then newest."""
    return [AddressDTO.from_entity(a) for a in await accounts.list_addresses(principal)]


@router.post(
    "/addresses",
    response_model=AddressDTO,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_address(
    request: CreateAddressRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    return AddressDTO.from_entity(await accounts.create_address(principal, request))


@router.get("/addresses/{address_id}", response_model=AddressDTO, response_model_by_alias=True)
async def get_address(
    address_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    return AddressDTO.from_entity(await accounts.get_address(principal, address_id))


@router.put("/addresses/{address_id}/default")
async def set_default_address(
    address_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    accounts: AccountService = Depends(get_account_service),
):
    """Make one address the default; all others lose the flag atomically."""
    await accounts.set_default_address(principal, address_id)
    return {"success": True}
