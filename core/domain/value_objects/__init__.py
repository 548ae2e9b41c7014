"""Domain value objects."""

from .execution_id import ExecutionID
from .mirror_document_id import ORDER_DOCUMENT_PREFIX, MirrorDocumentId
from .order_number import OrderNumber
from .sync_stats import SyncStats
from .timestamps import from_unix_seconds, parse_iso8601, to_iso8601, utc_now

__all__ = [
    "ExecutionID",
    "MirrorDocumentId",
    "ORDER_DOCUMENT_PREFIX",
    "OrderNumber",
    "SyncStats",
    "from_unix_seconds",
    "parse_iso8601",
    "to_iso8601",
    "utc_now",
]
