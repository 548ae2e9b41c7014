"""Pytest configuration and shared fixtures."""

from decimal import Decimal
from typing import AsyncGenerator, List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.dependencies import (
    get_content_mirror,
    get_payment_gateway,
    get_retry_policy,
    get_session_factory,
    get_settings,
    get_token_verifier,
)
from api.main import app
from core.data.models.base import Base
from core.data.uow import create_uow
from core.domain.entities import Address, Order, OrderItem, Product, ProductVariant, User
from core.domain.enums import OrderStatus
from core.infrastructure.retry import RetryPolicy
from core.settings import AppSettings
from core.settings.modules import (
    DatabaseSettings,
    FirebaseSettings,
    LoggingSettings,
    SanitySettings,
    StripeSettings,
    SyncSettings,
)
from tests.mocks.content_mirror import InMemoryContentMirror
from tests.mocks.payment_gateway import WEBHOOK_SECRET, FakePaymentGateway
from tests.mocks.token_verifier import FakeTokenVerifier


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SYNC_SECRET = "test-sync-secret"

FAST_RETRY = RetryPolicy(max_attempts=3, backoff_seconds=0.0)


# =============================================================================
# DATABASE
# =============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create test session factory."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    yield session_factory


@pytest_asyncio.fixture
async def test_session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with test_session_factory() as session:
        yield session


# =============================================================================
# COLLABORATOR DOUBLES
# =============================================================================

@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def content_mirror() -> InMemoryContentMirror:
    return InMemoryContentMirror()


@pytest.fixture
def token_verifier() -> FakeTokenVerifier:
    return FakeTokenVerifier()


def make_settings(
    sync_secret: Optional[str] = SYNC_SECRET,
    sanity_webhook_secret: Optional[str] = None,
) -> AppSettings:
    """Settings that never read the developer's environment for secrets."""
    return AppSettings(
        database=DatabaseSettings(database_url=TEST_DATABASE_URL, retry_attempts=3, retry_backoff_seconds=0),
        stripe=StripeSettings(secret_key="sk_test_fake", webhook_secret=WEBHOOK_SECRET),
        sanity=SanitySettings(project_id="testproj", api_token="", webhook_secret=sanity_webhook_secret),
        firebase=FirebaseSettings(),
        sync=SyncSettings(api_secret=sync_secret),
        logging=LoggingSettings(),
    )


@pytest.fixture
def test_settings() -> AppSettings:
    return make_settings()


# =============================================================================
# API CLIENT
# =============================================================================

@pytest.fixture
def test_client(
    test_session_factory,
    payment_gateway,
    content_mirror,
    token_verifier,
    test_settings,
) -> TestClient:
    """Create FastAPI test client wired to the test database and doubles."""
    app.dependency_overrides[get_session_factory] = lambda: test_session_factory
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    app.dependency_overrides[get_content_mirror] = lambda: content_mirror
    app.dependency_overrides[get_token_verifier] = lambda: token_verifier
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_retry_policy] = lambda: FAST_RETRY

    client = TestClient(app, raise_server_exceptions=False)
    yield client

    # Cleanup
    app.dependency_overrides.clear()


# =============================================================================
# SEED HELPERS
# =============================================================================

async def seed_user(
    session_factory,
    email: str = "ada@example.com",
    name: Optional[str] = "Ada Lovelace",
    firebase_uid: Optional[str] = "uid-ada",
) -> User:
    user = User(email=email, name=name, firebase_uid=firebase_uid)
    async with create_uow(session_factory) as uow:
        await uow.users.add(user)
        await uow.commit()
    return user


async def seed_product(
    session_factory,
    product_id: str = "prod-tee",
    slug: str = "grail-tee",
    name: str = "Grail Tee",
    price: str = "10.00",
    variants: Optional[List[ProductVariant]] = None,
) -> Product:
    product = Product(
        id=product_id,
        slug=slug,
        name=name,
        price=Decimal(price),
        variants=variants or [],
    )
    async with create_uow(session_factory) as uow:
        await uow.products.add(product)
        await uow.commit()
    return product


async def seed_address(session_factory, user: User, is_default: bool = False, street: str = "1 Main St") -> Address:
    address = Address(
        user_id=user.id,
        street=street,
        city="Springfield",
        state="IL",
        postal_code="62701",
        country="US",
        is_default=is_default,
    )
    async with create_uow(session_factory) as uow:
        await uow.addresses.add(address)
        await uow.commit()
    return address


async def seed_order(
    session_factory,
    user: User,
    items: Optional[List[OrderItem]] = None,
    status: OrderStatus = OrderStatus.PROCESSING,
    intent_id: Optional[str] = "pi_seeded_1",
    shipping_address: Optional[Address] = None,
) -> Order:
    if items is None:
        items = [OrderItem(product_id="prod-tee", quantity=2, price=Decimal("10.00"))]
    order = Order.create(
        user_id=user.id,
        items=items,
        status=status,
        stripe_payment_intent_id=intent_id,
        shipping_address_id=shipping_address.id if shipping_address else None,
    )
    async with create_uow(session_factory) as uow:
        await uow.orders.add(order)
        await uow.commit()
    return order


async def load_order(session_factory, order_id: str) -> Optional[Order]:
    async with create_uow(session_factory) as uow:
        return await uow.orders.find_by_id(order_id)
