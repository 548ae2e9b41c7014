"""DTOs for order sync operations."""
from typing import Optional

from pydantic import BaseModel, Field

from core.domain.value_objects import SyncStats


class SyncStatsDTO(BaseModel):
    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: int = 0
    total: int = 0

    @classmethod
    def from_stats(cls, stats: SyncStats) -> "SyncStatsDTO":
        return cls(**stats.to_dict())


class SyncResponseDTO(BaseModel):
    """Response DTO for the push / pull endpoints."""

    success: bool
    stats: SyncStatsDTO = Field(default_factory=SyncStatsDTO)
    message: str


class StatusWebhookResponseDTO(BaseModel):
    """Response DTO for a handled content-mirror status webhook."""

    success: Optional[bool] = None
    message: str
    order_id: Optional[str] = Field(default=None, serialization_alias="orderId")
    old_status: Optional[str] = Field(default=None, serialization_alias="oldStatus")
    new_status: Optional[str] = Field(default=None, serialization_alias="newStatus")
