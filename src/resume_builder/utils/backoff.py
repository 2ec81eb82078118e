"""Exponential-backoff retry wrapper for remote calls."""

from __future__ import annotations

import logging
import random
from typing import Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

JITTER_RATIO = 0.1


class JitteredBackoff:
    """tenacity wait strategy: ``min(base * 2**(n-1), max)`` plus up to 10% jitter."""

    def __init__(self, base_seconds: float, max_seconds: float):
        self.base_seconds = base_seconds
        self.max_seconds = max_seconds

    def __call__(self, retry_state: RetryCallState) -> float:
        retry_number = retry_state.attempt_number  # failed attempts so far
        delay = min(self.base_seconds * 2 ** (retry_number - 1), self.max_seconds)
        return delay + random.uniform(0, JITTER_RATIO * delay)


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    sleep = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.info(
        "Retry attempt %d in %dms after %s",
        retry_state.attempt_number,
        round(sleep * 1000),
        type(exc).__name__ if exc else "failure",
    )


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay_ms: int = 1000,
    max_delay_ms: int = 30000,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    never_retry: tuple[type[BaseException], ...] = (),
) -> T:
    """Run ``operation`` up to ``max_retries + 1`` times.

    Only exceptions matching ``retry_on`` are retried; ``never_retry`` carves
    subclasses back out of it. When every attempt fails, the last attempt's
    exception is re-raised unchanged so callers can classify it.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=JitteredBackoff(base_delay_ms / 1000, max_delay_ms / 1000),
        retry=retry_if_exception_type(retry_on) & retry_if_not_exception_type(never_retry),
        before_sleep=_log_retry,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            result = await operation()
    return result
