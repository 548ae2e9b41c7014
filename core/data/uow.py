"""Unit of Work pattern for atomic transactions."""

import logging
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from core.domain.value_objects import ExecutionID
from core.infrastructure.retry import NO_RETRY, RetryPolicy, retry_async

from .repositories import (
    SqlAlchemyAddressRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyUserRepository,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors after which re-running the whole transaction can succeed
TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError, StaleDataError)


class UnitOfWork:
    """
    Unit of Work pattern for atomic transactions.

    Responsibilities:
    1. Manage SQLAlchemy session lifecycle
    2. Propagate ExecutionID across all operations
    3. Atomic commit/rollback of all repository operations
    4. Lazy initialization of repositories

    Leaving the context without `commit()` rolls everything back.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        """Initialize Unit of Work.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None
        self._execution_id: Optional[ExecutionID] = None

        # Lazy-loaded repositories
        self._order_repository: Optional[SqlAlchemyOrderRepository] = None
        self._user_repository: Optional[SqlAlchemyUserRepository] = None
        self._address_repository: Optional[SqlAlchemyAddressRepository] = None
        self._product_repository: Optional[SqlAlchemyProductRepository] = None

    async def __aenter__(self) -> "UnitOfWork":
        """Start transaction scope."""
        self._session = self._session_factory()
        self._execution_id = ExecutionID.generate()
        self._order_repository = None
        self._user_repository = None
        self._address_repository = None
        self._product_repository = None
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Roll back whatever was not committed, then release the session."""
        try:
            await self._session.rollback()
        finally:
            await self._session.close()
            self._session = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._session

    @property
    def execution_id(self) -> ExecutionID:
        """Get current execution ID for tracing.

        Returns:
            ExecutionID value object
        """
        if self._execution_id is None:
            raise RuntimeError("UnitOfWork not initialized. Use async context manager.")
        return self._execution_id

    @property
    def orders(self) -> SqlAlchemyOrderRepository:
        """Lazy-load order repository."""
        if self._order_repository is None:
            self._order_repository = SqlAlchemyOrderRepository(self._require_session())
        return self._order_repository

    @property
    def users(self) -> SqlAlchemyUserRepository:
        """Lazy-load user repository."""
        if self._user_repository is None:
            self._user_repository = SqlAlchemyUserRepository(self._require_session())
        return self._user_repository

    @property
    def addresses(self) -> SqlAlchemyAddressRepository:
        """Lazy-load address repository."""
        if self._address_repository is None:
            self._address_repository = SqlAlchemyAddressRepository(self._require_session())
        return self._address_repository

    @property
    def products(self) -> SqlAlchemyProductRepository:
        """Lazy-load product repository."""
        if self._product_repository is None:
            self._product_repository = SqlAlchemyProductRepository(self._require_session())
        return self._product_repository

    async def commit(self) -> None:
        """Commit all pending changes."""
        await self._require_session().commit()

    async def rollback(self) -> None:
        """Rollback all pending changes."""
        await self._require_session().rollback()


def create_uow(session_factory: async_sessionmaker) -> UnitOfWork:
    """Create a new Unit of Work instance.

    Args:
        session_factory: SQLAlchemy async session factory

    Returns:
        UnitOfWork instance
    """
    return UnitOfWork(session_factory)


async def run_in_transaction(
    session_factory: async_sessionmaker,
    work: Callable[[UnitOfWork], Awaitable[T]],
    policy: RetryPolicy = NO_RETRY,
    description: str = "transaction",
) -> T:
    """
    Run `work` inside a fresh Unit of Work and commit it.

    On a transient database error the whole transaction is rolled back and
    `work` is run again from scratch, up to `policy.max_attempts` times.
    `work` must therefore not have side effects outside the database.
    """

    async def attempt() -> T:
        async with create_uow(session_factory) as uow:
            result = await work(uow)
            await uow.commit()
            return result

    return await retry_async(attempt, policy, TRANSIENT_DB_ERRORS, description)
