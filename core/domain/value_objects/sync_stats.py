"""Counters for one sync pass."""
from dataclasses import asdict, dataclass
from typing import Dict

from ..enums import SyncStatus


@dataclass
class SyncStats:
    """
    Created/updated/deleted/error counters for a sync batch.

    A batch with errors still reports the orders that succeeded; the
    FAILED status is advisory only.
    """
    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: int = 0
    total: int = 0

    @property
    def status(self) -> SyncStatus:
        return SyncStatus.FAILED if self.errors > 0 else SyncStatus.SUCCESS

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
