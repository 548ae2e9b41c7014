"""
Checkout service.

Turns a cart into a payment intent (plus the local order that tracks it)
or a hosted checkout session.

Pricing trust boundary: when a cart line resolves to a catalog product,
the catalog price is charged and stored. The client price is only used
for lines that resolve to nothing, which become stand-in products.
"""

from dataclasses import dataclass
from decimal import Decimal
import json
import logging
from typing import List, Optional
import uuid

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CheckoutItemDTO,
    CheckoutSessionResponse,
    CreateCheckoutSessionRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
)
from core.application.interfaces import IPaymentGateway, PaymentIntentResult
from core.data.uow import UnitOfWork, run_in_transaction
from core.domain.entities import Address, Order, OrderItem, Product, to_amount
from core.domain.enums import OrderStatus
from core.domain.exceptions import ValidationError
from core.domain.value_objects import utc_now, to_iso8601
from core.infrastructure.retry import NO_RETRY, RetryPolicy

from .account_service import resolve_or_provision_user


logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "http://localhost:3000"


@dataclass
class PricedLine:
    """A cart line with the unit price that will actually be charged."""
    item: CheckoutItemDTO
    unit_price: Decimal
    catalog_product_id: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.item.quantity


def to_cents(amount: Decimal) -> int:
    return int((to_amount(amount) * 100).to_integral_value())


class CheckoutService:
    """
    Checkout orchestration.

    Responsibilities:
    - Validate the cart before any side effect
    - Price lines against the catalog
    - Create the payment intent with an idempotency key
    - Persist user, address, order and items in one retried transaction
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        retry_policy: RetryPolicy = NO_RETRY,
    ) -> None:
        self._session_factory = session_factory
        self._gateway = gateway
        self._retry_policy = retry_policy

    # ------------------------------------------------------------------ pricing

    async def price_items(self, items: List[CheckoutItemDTO]) -> List[PricedLine]:
        """Resolve each cart line against the catalog."""

        async def work(uow: UnitOfWork) -> List[PricedLine]:
            lines = []
            for item in items:
                product = await uow.products.find_by_reference(item.id, item.original_id, item.name)
                if product is not None:
                    if to_amount(item.price) != product.price:
                        logger.warning(
                            f"Client price {item.price} for {item.id} differs from catalog "
                            f"price {product.price}; charging catalog price"
                        )
                    lines.append(PricedLine(item, product.price, product.id))
                else:
                    lines.append(PricedLine(item, to_amount(item.price)))
            return lines

        return await run_in_transaction(self._session_factory, work, self._retry_policy, "price cart")

    @staticmethod
    def _validate_items(items: List[CheckoutItemDTO]) -> None:
        if not items:
            raise ValidationError("Items are required")

    # ----------------------------------------------------------- payment intent

    async def create_payment_intent(self, request: CreatePaymentIntentRequest) -> PaymentIntentResponse:
        """
        Create a payment intent and the PROCESSING order that tracks it.

        Raises:
            ValidationError: Empty cart or no way to identify the customer
            PaymentGatewayError: Stripe rejected or could not be reached
        """
        self._validate_items(request.items)
        metadata = request.metadata
        if not metadata.user_id and not metadata.customer_email:
            raise ValidationError("Could not identify user for this order")

        lines = await self.price_items(request.items)
        total = to_amount(sum((line.line_total for line in lines), Decimal("0")))
        shipping_cost = (request.shipping or {}).get("cost") or 0

        stripe_metadata = {
            key: str(value) for key, value in (metadata.model_extra or {}).items()
        }
        stripe_metadata.update(
            {
                "customer_name": metadata.customer_name,
                "customer_email": metadata.customer_email,
                "shipping_address": metadata.shipping_address,
                "user_id": metadata.user_id,
                "total": str(total),
                "shipping_cost": str(shipping_cost),
                "item_count": str(len(lines)),
                "created_at": to_iso8601(utc_now()),
                "items": json.dumps(
                    [
                        {
                            "id": line.item.id,
                            "variantId": line.item.variant_id,
                            "quantity": line.item.quantity,
                            "price": float(line.unit_price),
                            "name": line.item.name,
                        }
                        for line in lines
                    ]
                ),
            }
        )

        shipping_address = Address.parse_shipping_line("", metadata.shipping_address)
        shipping_block = None
        if shipping_address is not None:
            shipping_block = {
                "name": metadata.customer_name,
                "address": {
                    "line1": shipping_address.street,
                    "city": shipping_address.city,
                    "state": shipping_address.state,
                    "postal_code": shipping_address.postal_code,
                    "country": shipping_address.country,
                },
            }

        intent = await self._gateway.create_payment_intent(
            amount_cents=to_cents(total),
            metadata=stripe_metadata,
            description=f"Order for {metadata.customer_name or 'Customer'}",
            receipt_email=metadata.customer_email or None,
            shipping=shipping_block,
            idempotency_key=request.idempotency_key,
        )

        order = await run_in_transaction(
            self._session_factory,
            lambda uow: self._record_order(uow, request, lines, intent),
            self._retry_policy,
            f"record order for {intent.intent_id}",
        )

        return PaymentIntentResponse(
            client_secret=intent.client_secret,
            payment_intent_id=intent.intent_id,
            order_id=order.id,
            total=float(order.total),
        )

    async def _record_order(
        self,
        uow: UnitOfWork,
        request: CreatePaymentIntentRequest,
        lines: List[PricedLine],
        intent: PaymentIntentResult,
    ) -> Order:
        existing = await uow.orders.find_by_payment_intent_id(intent.intent_id)
        if existing is not None:
            logger.info(f"Order {existing.id} already exists for {intent.intent_id}, reusing it")
            return existing

        metadata = request.metadata
        user = await resolve_or_provision_user(
            uow,
            firebase_uid=metadata.user_id or None,
            email=metadata.customer_email or None,
            name=metadata.customer_name or None,
        )

        shipping_address_id = None
        address = Address.parse_shipping_line(user.id, metadata.shipping_address)
        if address is not None:
            await uow.addresses.add(address)
            shipping_address_id = address.id

        order_id = str(uuid.uuid4())
        items = []
        for line in lines:
            product = await self._resolve_product(uow, line, order_id)
            variant = product.find_variant(line.item.variant_id)
            if variant is not None:
                await uow.products.decrement_variant_stock(variant.id, line.item.quantity)
            items.append(
                OrderItem(
                    product_id=product.id,
                    variant_id=variant.id if variant is not None else None,
                    quantity=line.item.quantity,
                    price=line.unit_price,
                )
            )

        order = Order.create(
            user_id=user.id,
            items=items,
            status=OrderStatus.PROCESSING,
            stripe_payment_intent_id=intent.intent_id,
            shipping_address_id=shipping_address_id,
            order_id=order_id,
        )
        await uow.orders.add(order)
        logger.info(
            f"[{uow.execution_id.value}] ✅ Order {order.order_number} created for "
            f"{intent.intent_id} (total {order.total})"
        )
        return order

    @staticmethod
    async def _resolve_product(uow: UnitOfWork, line: PricedLine, order_id: str) -> Product:
        item = line.item
        product = await uow.products.find_by_reference(item.id, item.original_id, item.name)
        if product is not None:
            return product

        suffix = uuid.uuid4().hex[:12]
        product = Product(
            id=item.original_id or item.id or f"temp-{suffix}",
            slug=item.id or f"temp-product-{suffix}",
            name=item.name or f"Product from order {order_id}",
            price=line.unit_price,
            description=item.description or "Added during checkout",
            images=[item.image] if item.image else [],
            in_stock=True,
        )
        await uow.products.add(product)
        logger.info(f"Created stand-in product {product.id} during checkout")
        return product

    # --------------------------------------------------------- checkout session

    async def create_checkout_session(
        self,
        request: CreateCheckoutSessionRequest,
        origin: Optional[str] = None,
    ) -> CheckoutSessionResponse:
        """Create a hosted checkout session; no local records are written."""
        self._validate_items(request.items)
        lines = await self.price_items(request.items)
        total = to_amount(sum((line.line_total for line in lines), Decimal("0")))

        line_items = []
        for line in lines:
            product_data = {
                "name": line.item.name or line.item.id or "Item",
                "metadata": {"product_id": line.item.id or ""},
            }
            if line.item.image:
                product_data["images"] = [line.item.image]
            if line.item.description:
                product_data["description"] = line.item.description
            line_items.append(
                {
                    "price_data": {
                        "currency": "usd",
                        "product_data": product_data,
                        "unit_amount": to_cents(line.unit_price),
                    },
                    "quantity": line.item.quantity,
                }
            )

        base = f"{origin or DEFAULT_ORIGIN}{request.return_url or '/checkout'}"
        shipping = request.shipping_info

        session = await self._gateway.create_checkout_session(
            line_items=line_items,
            success_url=f"{base}?success=true&session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{base}?canceled=true",
            metadata={
                "user_id": request.user_id or "",
                "customer_email": (shipping.email if shipping else None) or "",
                "customer_name": shipping.full_name if shipping else "",
                "shipping_address": shipping.address_line if shipping else "",
                "items": json.dumps(
                    [
                        {
                            "id": line.item.id,
                            "variantId": line.item.variant_id,
                            "quantity": line.item.quantity,
                            "price": float(line.unit_price),
                        }
                        for line in lines
                    ]
                ),
                "total": str(total),
            },
            idempotency_key=request.idempotency_key,
        )
        return CheckoutSessionResponse(session_id=session.session_id, url=session.url)
