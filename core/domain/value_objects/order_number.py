"""Order number value object."""
from dataclasses import dataclass
import secrets
import string
import time


_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class OrderNumber:
    """
    Human-facing order number.

    Format: ORD-{epoch milliseconds}-{6 random base36 chars}
    Example: ORD-1718000000000-k3x9qa

    Not guaranteed globally unique (the order id is), only collision-improbable.
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Order number cannot be empty")

    @classmethod
    def generate(cls) -> "OrderNumber":
        millis = int(time.time() * 1000)
        suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
        return cls(value=f"ORD-{millis}-{suffix}")

    def __str__(self) -> str:
        return self.value
