"""Unit tests for domain value objects and timestamp helpers."""

from datetime import datetime, timedelta, timezone
import re

import pytest

from core.domain.entities import Address
from core.domain.enums import SyncChannel, SyncStatus
from core.domain.value_objects import (
    ExecutionID,
    MirrorDocumentId,
    OrderNumber,
    SyncStats,
    from_unix_seconds,
    parse_iso8601,
    to_iso8601,
)


# =============================================================================
# MIRROR DOCUMENT ID
# =============================================================================

@pytest.mark.parametrize(
    "order_id",
    ["0b7c7f5e-1d1c-4a84-9f1e-3f1b9d1d0c2a", "order-nested", "order-", "x"],
)
def test_mirror_document_id_round_trip(order_id):
    """Only the leading prefix is stripped, so every id maps back to itself."""
    document_id = MirrorDocumentId.for_order(order_id)
    assert document_id.value == f"order-{order_id}"
    assert MirrorDocumentId(document_id.value).order_id == order_id


@pytest.mark.parametrize("value", ["", "order-", "syncState-1", "ord-123"])
def test_mirror_document_id_rejects_non_order_ids(value):
    with pytest.raises(ValueError):
        MirrorDocumentId(value)


def test_mirror_document_id_rejects_empty_order_id():
    with pytest.raises(ValueError):
        MirrorDocumentId.for_order("")


# =============================================================================
# ORDER NUMBER / EXECUTION ID
# =============================================================================

def test_order_number_format():
    number = OrderNumber.generate().value
    assert re.fullmatch(r"ORD-\d{13}-[0-9a-z]{6}", number), number


def test_order_numbers_differ():
    assert len({OrderNumber.generate().value for _ in range(50)}) == 50


def test_execution_id_is_unique():
    assert str(ExecutionID.generate()) != str(ExecutionID.generate())


# =============================================================================
# SYNC STATS
# =============================================================================

def test_sync_stats_status():
    assert SyncStats(created=2, total=2).status == SyncStatus.SUCCESS
    assert SyncStats(created=2, errors=1, total=3).status == SyncStatus.FAILED


def test_sync_stats_to_dict():
    stats = SyncStats(created=1, updated=2, errors=0, total=3)
    assert stats.to_dict() == {"created": 1, "updated": 2, "deleted": 0, "errors": 0, "total": 3}


def test_sync_channel_documents():
    assert SyncChannel.PUSH.document_id == "order-sync-state"
    assert SyncChannel.PULL.document_id == "sanity-to-db-sync-state"
    assert SyncChannel.STATUS_WEBHOOK.document_id == "webhook-order-status-sync"
    assert SyncChannel.STATUS_WEBHOOK.value == "webhook-order-status"


# =============================================================================
# TIMESTAMPS
# =============================================================================

def test_parse_iso8601_with_z_suffix():
    assert parse_iso8601("2024-03-01T10:15:30.250Z") == datetime(2024, 3, 1, 10, 15, 30, 250000)


def test_parse_iso8601_converts_offsets_to_utc():
    assert parse_iso8601("2024-03-01T12:00:00+02:00") == datetime(2024, 3, 1, 10, 0, 0)


@pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
def test_parse_iso8601_returns_none_for_garbage(value):
    assert parse_iso8601(value) is None


def test_parse_iso8601_accepts_aware_datetime():
    aware = datetime(2024, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=1)))
    assert parse_iso8601(aware) == datetime(2024, 3, 1, 11, 0)


def test_to_iso8601_uses_millisecond_z_format():
    assert to_iso8601(datetime(2024, 1, 1, 12, 0, 0)) == "2024-01-01T12:00:00.000Z"
    assert to_iso8601(None) is None


def test_from_unix_seconds():
    assert from_unix_seconds(0) == datetime(1970, 1, 1)
    assert from_unix_seconds("1700000000") == datetime(2023, 11, 14, 22, 13, 20)
    assert from_unix_seconds(None) is None
    assert from_unix_seconds("soon") is None


# =============================================================================
# ADDRESS PARSING
# =============================================================================

def test_parse_shipping_line():
    address = Address.parse_shipping_line("user-1", "1 Main St, Springfield, IL, 62701, US")

    assert address.user_id == "user-1"
    assert (address.street, address.city, address.state, address.postal_code, address.country) == (
        "1 Main St",
        "Springfield",
        "IL",
        "62701",
        "US",
    )
    assert address.is_default is False


@pytest.mark.parametrize("value", [None, "", "1 Main St, Springfield, IL"])
def test_parse_shipping_line_needs_five_parts(value):
    assert Address.parse_shipping_line("user-1", value) is None
