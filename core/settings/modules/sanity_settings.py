from __future__ import annotations

from typing import Optional

from pydantic import Field

from core.settings.base import StorefrontBaseSettings


class SanitySettings(StorefrontBaseSettings):
    """
    Sanity content-store settings (the order mirror).
    Loaded from .env file with exact variable name matching.
    """

    project_id: str = Field(default="arbp7h2s", alias="SANITY_PROJECT_ID")
    dataset: str = Field(default="production", alias="SANITY_DATASET")
    api_version: str = Field(default="2023-05-03", alias="SANITY_API_VERSION")
    api_token: str = Field(default="", alias="SANITY_API_TOKEN")

    # Shared secret for x-sanity-signature; unset means verification is skipped
    webhook_secret: Optional[str] = Field(default=None, alias="SANITY_WEBHOOK_SECRET")

    timeout_seconds: float = Field(default=15.0, alias="SANITY_TIMEOUT_SECONDS")
    retry_attempts: int = Field(default=3, alias="SANITY_RETRY_ATTEMPTS")
    retry_backoff_seconds: float = Field(default=0.5, alias="SANITY_RETRY_BACKOFF_SECONDS")

    @property
    def base_url(self) -> str:
        return f"https://{self.project_id}.api.sanity.io/v{self.api_version}"
