"""
utils/retry.py — Exponential-backoff retry decorator for async HTTP calls.

Uses tenacity under the hood. Only transport-level failures are retried by
default (connection errors, timeouts); an HTTP error status is an answer,
not a glitch, and goes straight back to the adapter.

Usage:
    from ausbiz_pipeline.utils.retry import with_retry

    @with_retry(max_attempts=2, base_delay=0.5)
    async def fetch_json(url: str) -> Any:
        async with httpx.AsyncClient(timeout=10.0) as client:
            r = await client.get(url)
            r.raise_for_status()
            return r.json()
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, Any]])

RETRYABLE: tuple[type[Exception], ...] = (httpx.TransportError,)


def with_retry(
    max_attempts: int = 2,
    base_delay: float = 0.5,
    max_delay: float = 5.0,
    retry_on: type[Exception] | tuple[type[Exception], ...] = RETRYABLE,
) -> Callable[[F], F]:
    """
    Decorator that retries an async function with exponential backoff.

    Delays: base_delay * 2^(attempt-1), capped at max_delay. The last
    exception is re-raised once attempts run out.

    Args:
        max_attempts: Total attempts before raising.
        base_delay:   Initial delay in seconds.
        max_delay:    Maximum delay cap in seconds.
        retry_on:     Exception type(s) that trigger a retry.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt_log = log.bind(function=fn.__qualname__)
            try:
                async for attempt in AsyncRetrying(
                    stop=stop_after_attempt(max_attempts),
                    wait=wait_exponential(multiplier=base_delay, max=max_delay),
                    retry=retry_if_exception_type(retry_on),
                    reraise=True,
                ):
                    with attempt:
                        attempt_num = attempt.retry_state.attempt_number
                        if attempt_num > 1:
                            attempt_log.warning(
                                "retry_attempt",
                                attempt=attempt_num,
                                max_attempts=max_attempts,
                            )
                        return await fn(*args, **kwargs)
            except retry_on as exc:
                attempt_log.warning(
                    "retry_exhausted", max_attempts=max_attempts, error=str(exc)
                )
                raise

        return wrapper  # type: ignore[return-value]

    return decorator
