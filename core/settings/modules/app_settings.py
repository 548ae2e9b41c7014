from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from core.settings.modules.database_settings import DatabaseSettings
from core.settings.modules.firebase_settings import FirebaseSettings
from core.settings.modules.logging_settings import LoggingSettings
from core.settings.modules.sanity_settings import SanitySettings
from core.settings.modules.stripe_settings import StripeSettings
from core.settings.modules.sync_settings import SyncSettings


class AppSettings(BaseModel):
    """
    Application settings aggregator.

    Each section is its own BaseSettings so it can be loaded (and overridden
    in tests) independently.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    database: DatabaseSettings
    stripe: StripeSettings
    sanity: SanitySettings
    firebase: FirebaseSettings
    sync: SyncSettings
    logging: LoggingSettings


@lru_cache()
def get_app_settings() -> AppSettings:
    return AppSettings(
        database=DatabaseSettings(),
        stripe=StripeSettings(),
        sanity=SanitySettings(),
        firebase=FirebaseSettings(),
        sync=SyncSettings(),
        logging=LoggingSettings(),
    )
