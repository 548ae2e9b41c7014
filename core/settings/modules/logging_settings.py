from __future__ import annotations

from pydantic import Field

from core.settings.base import StorefrontBaseSettings


class LoggingSettings(StorefrontBaseSettings):
    """Logging level and format."""

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    format: str = Field(
        default="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        alias="LOG_FORMAT",
    )
