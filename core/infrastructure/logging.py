"""
Logging infrastructure.

Root logger setup for the API process.
"""
import logging
from typing import Optional

from core.settings.modules.logging_settings import LoggingSettings


DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Install the root handler once at startup.

    Args:
        settings: Logging settings (level and format)
    """
    settings = settings or LoggingSettings()
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.format or DEFAULT_FORMAT))
        root.addHandler(handler)
    root.setLevel(settings.level.upper())

    # Third party clients are chatty at INFO
    logging.getLogger("stripe").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
