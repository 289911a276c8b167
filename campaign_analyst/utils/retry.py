"""Retry/backoff semantics for calls to rate-limited remote services."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

_TRANSIENT_MARKERS: tuple[str, ...] = ("429", "503")
_JITTER_RATIO = 0.1


class RetryConfig:
    def __init__(
        self,
        *,
        attempts: int = 5,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
    ) -> None:
        if attempts < 1:
            raise ValueError("Retry attempts must be at least 1.")
        self.attempts = attempts
        self.base_delay = base_delay
        self.max_delay = max_delay


class RetryExhaustedError(RuntimeError):
    """Raised once every attempt has failed with a transient error."""

    def __init__(self, last_error: BaseException, attempts: int) -> None:
        super().__init__(
            f"Operation failed after {attempts} attempts: {last_error}"
        )
        self.last_error = last_error
        self.attempts = attempts


def is_transient_error(exc: BaseException) -> bool:
    """Return True when the error message signals rate limiting or unavailability."""
    message = str(exc)
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def backoff_delay(
    attempt: int,
    *,
    base_delay: float,
    max_delay: float,
    rand: Callable[[], float] = random.random,
) -> float:
    """Delay in seconds to wait after the ``attempt``-th failure (1-based)."""
    delay = min(max_delay, base_delay * (2 ** (attempt - 1)))
    return delay + delay * _JITTER_RATIO * rand()


async def call_with_backoff(
    operation: Callable[..., Awaitable[T]],
    *args: Any,
    retry_config: RetryConfig | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    rand: Callable[[], float] = random.random,
    **kwargs: Any,
) -> T:
    """Await ``operation`` until it succeeds, retrying transient failures.

    Errors whose message carries a 429 or 503 status are retried with
    exponential backoff and up to 10% jitter. Anything else propagates
    untouched on the attempt that raised it. When the attempt budget runs out
    a :class:`RetryExhaustedError` wrapping the last error is raised.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        try:
            return await operation(*args, **kwargs)
        except Exception as exc:
            if not is_transient_error(exc):
                raise
            attempt += 1
            if attempt >= config.attempts:
                logger.error(
                    "Transient failure on final attempt %d/%d: %s",
                    attempt,
                    config.attempts,
                    exc,
                )
                raise RetryExhaustedError(exc, attempt) from exc

            delay = backoff_delay(
                attempt,
                base_delay=config.base_delay,
                max_delay=config.max_delay,
                rand=rand,
            )
            logger.warning(
                "Transient failure (attempt %d/%d); retrying in %.2fs: %s",
                attempt,
                config.attempts,
                delay,
                exc,
            )
            await sleep(delay)


__all__ = [
    "RetryConfig",
    "RetryExhaustedError",
    "backoff_delay",
    "call_with_backoff",
    "is_transient_error",
]
