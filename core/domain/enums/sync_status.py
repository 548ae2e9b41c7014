"""
Sync bookkeeping enums.
"""
from enum import Enum


class SyncStatus(str, Enum):
    """Outcome recorded in a Sync State document."""

    SUCCESS = "success"
    FAILED = "failed"


class SyncChannel(str, Enum):
    """
    Sync channels.

    The value is the `key` of the channel's Sync State document.
    """

    PUSH = "order-sync"
    PULL = "sanity-to-db"
    STATUS_WEBHOOK = "webhook-order-status"

    @property
    def document_id(self) -> str:
        return {
            SyncChannel.PUSH: "order-sync-state",
            SyncChannel.PULL: "sanity-to-db-sync-state",
            SyncChannel.STATUS_WEBHOOK: "webhook-order-status-sync",
        }[self]
