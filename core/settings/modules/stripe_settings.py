from __future__ import annotations

from pydantic import Field

from core.settings.base import StorefrontBaseSettings


class StripeSettings(StorefrontBaseSettings):
    """
    Stripe integration settings.
    Loaded from .env file with exact variable name matching.
    """

    secret_key: str = Field(default="", alias="STRIPE_SECRET_KEY")
    webhook_secret: str = Field(default="", alias="STRIPE_WEBHOOK_SECRET")
    currency: str = Field(default="usd", alias="STRIPE_CURRENCY")
    statement_descriptor: str = Field(default="GrailSeekers Order", alias="STRIPE_STATEMENT_DESCRIPTOR")

    # Network behaviour of the Stripe HTTP client
    timeout_seconds: int = Field(default=30, alias="STRIPE_TIMEOUT_SECONDS")
    max_network_retries: int = Field(default=2, alias="STRIPE_MAX_NETWORK_RETRIES")

    # Tolerance (seconds) for webhook timestamp checks
    webhook_tolerance: int = Field(default=300, alias="STRIPE_WEBHOOK_TOLERANCE")
