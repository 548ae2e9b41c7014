"""Content mirror (headless CMS) contract."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.domain.enums import SyncChannel
from core.domain.value_objects import SyncStats


class IContentMirror(ABC):
    """
    Interface for the document store that mirrors orders for operations.

    Documents are plain JSON-compatible dicts keyed by `_id`.
    """

    @abstractmethod
    async def fetch_order(self, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one order document by id, or None when absent."""
        pass

    @abstractmethod
    async def fetch_all_orders(self) -> List[Dict[str, Any]]:
        """Fetch every order document (bulk pull)."""
        pass

    @abstractmethod
    async def fetch_orders_by_status(self, status: str) -> List[Dict[str, Any]]:
        """Fetch order documents in one status, newest first."""
        pass

    @abstractmethod
    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def create_or_replace(self, document: Dict[str, Any]) -> Dict[str, Any]:
        pass

    async def push_order(self, document: Dict[str, Any]) -> str:
        """
        Upsert an order document.

        Returns:
            "created" if the document did not exist yet, otherwise "updated"
        """
        existing = await self.fetch_order(document["_id"])
        if existing:
            await self.create_or_replace(document)
            return "updated"
        await self.create(document)
        return "created"

    @abstractmethod
    async def record_sync_outcome(
        self,
        channel: SyncChannel,
        stats: SyncStats,
        **extra: Any,
    ) -> None:
        """
        Write the Sync State document for a channel.

        Best effort: implementations log and swallow failures.
        """
        pass
