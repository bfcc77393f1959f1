"""Retry with exponential backoff for network calls against targets and release mirrors.

A retry budget of zero (the default for live matching) means a single
attempt: a failed candidate fetch is simply a non-match.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel, Field

from fingerprinter.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig(BaseModel):
    """Tuneable parameters for retry behaviour."""

    max_retries: int = Field(
        default=0,
        ge=0,
        description="Retry attempts after the first failure before re-raising.",
    )
    base_delay: float = Field(
        default=1.0,
        gt=0.0,
        description="Base delay in seconds for exponential backoff.",
    )
    max_delay: float = Field(
        default=30.0,
        gt=0.0,
        description="Upper bound on delay in seconds.",
    )
    jitter: bool = Field(
        default=True,
        description="When enabled, randomise the delay within [0.5x, 1.5x].",
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryConfig:
        return cls(
            max_retries=settings.fetch_max_retries,
            base_delay=settings.retry_backoff_base,
            max_delay=settings.retry_max_delay,
        )


def _compute_delay(attempt: int, config: RetryConfig) -> float:
    """Return the backoff delay for *attempt* given *config*."""
    delay: float = min(config.base_delay * (2**attempt), config.max_delay)
    if config.jitter:
        delay *= random.uniform(0.5, 1.5)  # noqa: S311
    return delay


async def async_retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    config: RetryConfig,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """Await *fn* until it succeeds or the retry budget is spent.

    Parameters
    ----------
    fn:
        A zero-argument coroutine function.  It is called afresh on every
        attempt and must be safe to repeat.
    config:
        Retry parameters (see :class:`RetryConfig`).
    retryable_exceptions:
        Only exceptions whose type appears in this tuple trigger a retry.
        All other exceptions propagate immediately.

    Raises
    ------
    Exception
        The last exception raised by *fn* once ``config.max_retries``
        retries are exhausted.
    """
    last_exception: Exception | None = None

    for attempt in range(config.max_retries + 1):
        try:
            return await fn()
        except retryable_exceptions as exc:
            last_exception = exc
            if attempt >= config.max_retries:
                break
            delay = _compute_delay(attempt, config)
            logger.warning(
                "Retry %d/%d after %.1fs: %s",
                attempt + 1,
                config.max_retries,
                delay,
                exc,
            )
            await asyncio.sleep(delay)

    assert last_exception is not None  # noqa: S101
    raise last_exception
