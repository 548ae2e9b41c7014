# Settings modules
from .app_settings import AppSettings, get_app_settings
from .database_settings import DatabaseSettings
from .firebase_settings import FirebaseSettings
from .logging_settings import LoggingSettings
from .sanity_settings import SanitySettings
from .stripe_settings import StripeSettings
from .sync_settings import SyncSettings

__all__ = [
    "AppSettings",
    "get_app_settings",
    "DatabaseSettings",
    "FirebaseSettings",
    "LoggingSettings",
    "SanitySettings",
    "StripeSettings",
    "SyncSettings",
]
