"""Database engine and session factory."""

from .config import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
    transaction_retry_policy,
)

__all__ = [
    "close_database",
    "create_engine",
    "create_session_factory",
    "init_database",
    "transaction_retry_policy",
]
