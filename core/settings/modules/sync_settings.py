from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.settings.base import StorefrontBaseSettings


class SyncSettings(StorefrontBaseSettings):
    """
    Settings for the operational sync/export endpoints.
    """

    # Callers must send it in the X-Sync-Secret header; unset keeps the endpoints closed
    api_secret: Optional[str] = Field(default=None, alias="SYNC_API_SECRET")

    # Orders loaded per page while an export pass walks the whole store
    export_batch_limit: int = Field(default=500, gt=0, alias="SYNC_EXPORT_BATCH_LIMIT")
