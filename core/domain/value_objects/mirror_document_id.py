"""Content-mirror document id for an order."""
from dataclasses import dataclass


ORDER_DOCUMENT_PREFIX = "order-"


@dataclass(frozen=True)
class MirrorDocumentId:
    """
    Document id of an order in the content mirror: "order-" + local order id.

    Only the leading prefix is stripped when mapping back, so ids that
    themselves contain "order-" round-trip unchanged.
    """
    value: str

    def __post_init__(self):
        if not self.value.startswith(ORDER_DOCUMENT_PREFIX) or self.value == ORDER_DOCUMENT_PREFIX:
            raise ValueError(f"Not an order document id: {self.value!r}")

    @classmethod
    def for_order(cls, order_id: str) -> "MirrorDocumentId":
        if not order_id:
            raise ValueError("Order id cannot be empty")
        return cls(value=f"{ORDER_DOCUMENT_PREFIX}{order_id}")

    @property
    def order_id(self) -> str:
        return self.value[len(ORDER_DOCUMENT_PREFIX):]

    def __str__(self) -> str:
        return self.value
