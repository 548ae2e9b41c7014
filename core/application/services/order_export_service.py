"""CSV export of the orders awaiting fulfilment."""

import csv
import io
import logging
from typing import Any, Dict, List, Optional

from core.application.interfaces import IContentMirror
from core.domain.enums import OrderStatus
from core.domain.value_objects import parse_iso8601


logger = logging.getLogger(__name__)

CSV_HEADERS = [
    "Order Number",
    "Customer Name",
    "Customer Email",
    "Shipping Name",
    "Street Address",
    "City",
    "State",
    "Postal Code",
    "Country",
    "Order Total",
    "Items",
    "Order Date",
]

DEFAULT_COUNTRY = "United States"


def _plain_number(value: Any) -> str:
    number = float(value or 0)
    return str(int(number)) if number.is_integer() else str(number)


def _items_summary(items: Optional[List[Dict[str, Any]]]) -> str:
    if not items:
        return "No items"
    return "; ".join(
        f"{item.get('quantity')}x {item.get('name')} (${_plain_number(item.get('price'))})"
        for item in items
    )


def _order_date(value: Any) -> str:
    parsed = parse_iso8601(value)
    if parsed is None:
        return ""
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def order_row(document: Dict[str, Any]) -> List[str]:
    shipping = document.get("shippingAddress") or {}
    customer_name = document.get("customerName") or ""
    return [
        document.get("orderNumber") or "",
        customer_name,
        document.get("customerEmail") or "",
        shipping.get("name") or customer_name,
        shipping.get("street") or "",
        shipping.get("city") or "",
        shipping.get("state") or "",
        shipping.get("postalCode") or "",
        shipping.get("country") or DEFAULT_COUNTRY,
        f"${float(document.get('total') or 0):.2f}",
        _items_summary(document.get("items")),
        _order_date(document.get("createdAt")),
    ]


class ProcessingOrdersExporter:
    """Renders the mirror's PROCESSING orders as a CSV sheet."""

    def __init__(self, mirror: IContentMirror) -> None:
        self._mirror = mirror

    async def render_csv(self) -> Optional[str]:
        """
        Returns:
            CSV text, or None when no order is in PROCESSING
        """
        documents = await self._mirror.fetch_orders_by_status(OrderStatus.PROCESSING.value)
        if not documents:
            return None

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for document in documents:
            writer.writerow(order_row(document))
        logger.info(f"Exported {len(documents)} processing orders")
        return buffer.getvalue()
