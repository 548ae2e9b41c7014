"""
FastAPI Dependencies.

Provides dependency injection for settings, infrastructure clients and
application services. Tests replace the providers through
`app.dependency_overrides`.
"""
from __future__ import annotations

import hmac
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.interfaces import (
    AuthenticatedPrincipal,
    IContentMirror,
    IPaymentGateway,
    ITokenVerifier,
)
from core.application.services import (
    AccountService,
    CheckoutService,
    OrderApplicationService,
    OrderReconciler,
    PaymentWebhookService,
    ProcessingOrdersExporter,
)
from core.domain.exceptions import AuthenticationError
from core.infrastructure.database import create_engine, create_session_factory, transaction_retry_policy
from core.infrastructure.retry import RetryPolicy
from core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None
_payment_gateway: Optional[IPaymentGateway] = None
_content_mirror: Optional[IContentMirror] = None
_token_verifier: Optional[ITokenVerifier] = None


# =============================================================================
# SETTINGS & INFRASTRUCTURE
# =============================================================================

def get_settings() -> AppSettings:
    return get_app_settings()


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().database)
    return _engine


def get_session_factory() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = create_session_factory(get_engine())
        logger.info("Created session factory")
    return _session_factory


def get_retry_policy(settings: AppSettings = Depends(get_settings)) -> RetryPolicy:
    return transaction_retry_policy(settings.database)


def get_payment_gateway() -> IPaymentGateway:
    global _payment_gateway
    if _payment_gateway is None:
        from core.infrastructure.payments import StripePaymentGateway
        _payment_gateway = StripePaymentGateway(get_settings().stripe)
    return _payment_gateway


def get_content_mirror() -> IContentMirror:
    global _content_mirror
    if _content_mirror is None:
        from core.infrastructure.content_mirror import SanityContentMirror
        _content_mirror = SanityContentMirror(get_settings().sanity)
    return _content_mirror


def get_token_verifier() -> ITokenVerifier:
    global _token_verifier
    if _token_verifier is None:
        from core.infrastructure.auth import FirebaseTokenVerifier
        _token_verifier = FirebaseTokenVerifier(get_settings().firebase)
    return _token_verifier


# =============================================================================
# SECURITY
# =============================================================================

async def get_current_principal(
    authorization: Optional[str] = Header(default=None),
    verifier: ITokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedPrincipal:
    """Verify the `Authorization: Bearer <token>` header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Unauthorized")
    token = authorization[len("Bearer "):].strip()
    return await verifier.verify(token)


def require_sync_secret(
    x_sync_secret: Optional[str] = Header(default=None, alias="X-Sync-Secret"),
    settings: AppSettings = Depends(get_settings),
) -> None:
    """Gate operational endpoints behind SYNC_API_SECRET.

    Without a configured secret the endpoints stay closed.
    """
    expected = settings.sync.api_secret
    if not expected:
        logger.error("SYNC_API_SECRET is not configured; refusing operational request")
        raise AuthenticationError("Sync endpoints are disabled: SYNC_API_SECRET is not configured")
    if not x_sync_secret or not hmac.compare_digest(x_sync_secret, expected):
        raise AuthenticationError("Invalid sync secret")


# =============================================================================
# APPLICATION SERVICES
# =============================================================================

def get_checkout_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> CheckoutService:
    return CheckoutService(session_factory, gateway, retry_policy)


def get_payment_webhook_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> PaymentWebhookService:
    return PaymentWebhookService(session_factory, gateway, retry_policy)


def get_order_reconciler(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    mirror: IContentMirror = Depends(get_content_mirror),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
    settings: AppSettings = Depends(get_settings),
) -> OrderReconciler:
    return OrderReconciler(
        session_factory,
        mirror,
        retry_policy,
        export_limit=settings.sync.export_batch_limit,
    )


def get_account_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> AccountService:
    return AccountService(session_factory, retry_policy)


def get_order_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    retry_policy: RetryPolicy = Depends(get_retry_policy),
) -> OrderApplicationService:
    return OrderApplicationService(session_factory, retry_policy)


def get_orders_exporter(
    mirror: IContentMirror = Depends(get_content_mirror),
) -> ProcessingOrdersExporter:
    return ProcessingOrdersExporter(mirror)


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _engine, _session_factory, _payment_gateway, _content_mirror, _token_verifier

    _engine = None
    _session_factory = None
    _payment_gateway = None
    _content_mirror = None
    _token_verifier = None

    logger.info("Dependencies reset")
