"""Bounded retry for transient failures (database transactions, HTTP calls)."""

import asyncio
from dataclasses import dataclass
import logging
from typing import Awaitable, Callable, Tuple, Type, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy: fixed number of attempts with exponential backoff."""

    max_attempts: int = 3
    backoff_seconds: float = 0.0
    backoff_multiplier: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        return self.backoff_seconds * (self.backoff_multiplier ** (attempt - 1))


NO_RETRY = RetryPolicy(max_attempts=1)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    retry_on: Tuple[Type[BaseException], ...],
    description: str = "operation",
) -> T:
    """
    Run `operation` until it succeeds or the policy is exhausted.

    Only exceptions listed in `retry_on` are retried; anything else, and the
    last retryable failure, propagates to the caller.
    """
    attempts = max(1, policy.max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            if attempt >= attempts:
                logger.error(f"❌ {description} failed after {attempt} attempts: {exc}")
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                f"{description} failed (attempt {attempt}/{attempts}): {exc!r}; "
                f"retrying in {delay:.2f}s"
            )
            if delay > 0:
                await asyncio.sleep(delay)
    raise RuntimeError("unreachable")  # pragma: no cover
