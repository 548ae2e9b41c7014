"""
Sanity Content Mirror Implementation.

Talks to the Sanity HTTP API (GROQ query + mutations endpoints) with
aiohttp. Transport errors, 429 and 5xx responses are retried under a
bounded RetryPolicy; other failures surface as ContentMirrorError.
"""
import asyncio
from datetime import datetime
from decimal import Decimal
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from core.application.interfaces import IContentMirror
from core.domain.enums import SyncChannel
from core.domain.exceptions import ContentMirrorError
from core.domain.value_objects import SyncStats, to_iso8601, utc_now
from core.infrastructure.retry import RetryPolicy, retry_async
from core.settings.modules.sanity_settings import SanitySettings


logger = logging.getLogger(__name__)


ORDER_BY_ID_QUERY = '*[_type == "order" && _id == $id][0]'

ALL_ORDERS_QUERY = """
*[_type == "order"] {
  _id,
  _updatedAt,
  orderNumber,
  userId,
  customerEmail,
  customerName,
  total,
  status,
  items[] {
    _key,
    itemId,
    productId,
    variantId,
    name,
    quantity,
    price
  },
  shippingAddress,
  stripePaymentIntentId,
  createdAt,
  updatedAt
}
"""

ORDERS_BY_STATUS_QUERY = """
*[_type == "order" && status == $status] | order(createdAt desc) {
  _id,
  orderNumber,
  customerName,
  customerEmail,
  shippingAddress,
  total,
  createdAt,
  items[] {
    name,
    quantity,
    price
  }
}
"""


class _RetryableResponse(Exception):
    """Server side failure worth another attempt."""


def to_wire(value: Any) -> Any:
    """Convert decimals to floats and datetimes to ISO-8601 strings, recursively."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return to_iso8601(value)
    if isinstance(value, dict):
        return {key: to_wire(item) for key, item in value.items() if item is not None}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value


class SanityContentMirror(IContentMirror):
    """Sanity implementation of the content mirror."""

    def __init__(self, settings: SanitySettings):
        """
        Initialize Sanity client.

        Args:
            settings: Sanity project, dataset, token and network settings
        """
        self.settings = settings
        self.retry_policy = RetryPolicy(
            max_attempts=settings.retry_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )
        self._timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        logger.info(
            f"SanityContentMirror initialized (project={settings.project_id}, "
            f"dataset={settings.dataset})"
        )

    # ------------------------------------------------------------------ queries

    async def fetch_order(self, document_id: str) -> Optional[Dict[str, Any]]:
        return await self.query(ORDER_BY_ID_QUERY, {"id": document_id})

    async def fetch_all_orders(self) -> List[Dict[str, Any]]:
        return await self.query(ALL_ORDERS_QUERY) or []

    async def fetch_orders_by_status(self, status: str) -> List[Dict[str, Any]]:
        return await self.query(ORDERS_BY_STATUS_QUERY, {"status": status}) or []

    async def query(self, groq: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GROQ query.

        Query parameters are passed JSON encoded as `$name` URL parameters.
        """
        url = f"{self.settings.base_url}/data/query/{self.settings.dataset}"
        query_params = {"query": groq}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)

        body = await self._request("GET", url, params=query_params, description="Sanity query")
        return body.get("result")

    # ---------------------------------------------------------------- mutations

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("create", document)

    async def create_or_replace(self, document: Dict[str, Any]) -> Dict[str, Any]:
        return await self._mutate("createOrReplace", document)

    async def _mutate(self, operation: str, document: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.settings.base_url}/data/mutate/{self.settings.dataset}"
        payload = {"mutations": [{operation: to_wire(document)}]}
        body = await self._request(
            "POST",
            url,
            params={"returnDocuments": "true"},
            json_body=payload,
            description=f"Sanity {operation} {document.get('_id')}",
        )
        results = body.get("results") or []
        return (results[0].get("document") if results else None) or {}

    async def record_sync_outcome(
        self,
        channel: SyncChannel,
        stats: SyncStats,
        **extra: Any,
    ) -> None:
        document = {
            "_type": "syncState",
            "_id": channel.document_id,
            "key": channel.value,
            "lastSyncTime": utc_now(),
            "syncStatus": stats.status.value,
            "syncStats": stats.to_dict(),
        }
        document.update(extra)
        try:
            await self.create_or_replace(document)
        except ContentMirrorError as e:
            logger.error(f"Error updating sync state {channel.document_id}: {e}")

    # ---------------------------------------------------------------- transport

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        description: str = "Sanity request",
    ) -> Dict[str, Any]:
        headers = {"Accept": "application/json"}
        if self.settings.api_token:
            headers["Authorization"] = f"Bearer {self.settings.api_token}"

        async def attempt() -> Dict[str, Any]:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.request(
                    method, url, params=params, json=json_body, headers=headers
                ) as response:
                    text = await response.text()
                    if response.status == 429 or response.status >= 500:
                        raise _RetryableResponse(f"HTTP {response.status}: {text[:200]}")
                    if response.status >= 400:
                        raise ContentMirrorError(
                            f"{description} rejected: HTTP {response.status}: {text[:200]}"
                        )
                    return json.loads(text) if text else {}

        try:
            return await retry_async(
                attempt,
                self.retry_policy,
                (aiohttp.ClientError, asyncio.TimeoutError, _RetryableResponse),
                description,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, _RetryableResponse) as e:
            raise ContentMirrorError(f"{description} failed: {e}") from e
        except ValueError as e:
            raise ContentMirrorError(f"{description} returned invalid JSON: {e}") from e
