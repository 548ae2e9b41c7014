"""In-memory content mirror used in place of Sanity."""
import copy
from typing import Any, Dict, List, Optional, Set

from core.application.interfaces import IContentMirror
from core.domain.enums import SyncChannel
from core.domain.exceptions import ContentMirrorError
from core.domain.value_objects import SyncStats, to_iso8601, utc_now
from core.infrastructure.content_mirror import to_wire


class InMemoryContentMirror(IContentMirror):
    """
    Stores documents in a dict, JSON-shaped the way the real client sends them.

    `failing_ids` makes writes of those document ids raise, and
    `fail_reads` makes every read raise.
    """

    def __init__(self):
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.sync_states: Dict[str, Dict[str, Any]] = {}
        self.failing_ids: Set[str] = set()
        self.fail_reads = False
        self.writes: List[str] = []

    def put(self, document: Dict[str, Any], updated_at: Optional[str] = None) -> Dict[str, Any]:
        """Store a document directly (as an editor would)."""
        stored = to_wire(document)
        stored["_updatedAt"] = updated_at or to_iso8601(utc_now())
        self.documents[stored["_id"]] = stored
        return stored

    def _orders(self) -> List[Dict[str, Any]]:
        if self.fail_reads:
            raise ContentMirrorError("Sanity query failed: HTTP 503")
        return [copy.deepcopy(doc) for doc in self.documents.values() if doc.get("_type") == "order"]

    async def fetch_order(self, document_id: str) -> Optional[Dict[str, Any]]:
        return next((doc for doc in self._orders() if doc["_id"] == document_id), None)

    async def fetch_all_orders(self) -> List[Dict[str, Any]]:
        return self._orders()

    async def fetch_orders_by_status(self, status: str) -> List[Dict[str, Any]]:
        matching = [doc for doc in self._orders() if doc.get("status") == status]
        return sorted(matching, key=lambda doc: doc.get("createdAt") or "", reverse=True)

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        self._check_writable(document)
        if document["_id"] in self.documents:
            raise ContentMirrorError(f"Document {document['_id']} already exists")
        self.writes.append(f"create:{document['_id']}")
        return self.put(document)

    async def create_or_replace(self, document: Dict[str, Any]) -> Dict[str, Any]:
        self._check_writable(document)
        self.writes.append(f"createOrReplace:{document['_id']}")
        return self.put(document)

    def _check_writable(self, document: Dict[str, Any]) -> None:
        if document["_id"] in self.failing_ids:
            raise ContentMirrorError(f"Sanity create {document['_id']} rejected: HTTP 400")

    async def record_sync_outcome(self, channel: SyncChannel, stats: SyncStats, **extra: Any) -> None:
        state = {
            "key": channel.value,
            "syncStatus": stats.status.value,
            "syncStats": stats.to_dict(),
        }
        state.update(extra)
        self.sync_states[channel.document_id] = state
