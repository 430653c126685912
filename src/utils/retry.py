"""Retry helpers with exponential backoff for flaky external APIs.

Only errors classified as transient (network, rate limit, temporary service
outage) are retried. Everything else propagates on the first failure.
"""

import asyncio
import functools
import inspect
import logging
import random
import time
from typing import Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """Base class for errors that are worth another attempt."""


class NetworkError(RetryableError):
    """Connection reset, DNS failure, socket timeout."""


class APIRateLimitError(RetryableError):
    """Upstream API signalled a rate limit (HTTP 429 or equivalent)."""


class TemporaryServiceError(RetryableError):
    """Upstream service is temporarily unavailable (HTTP 5xx)."""


RETRYABLE_ERRORS: Tuple[Type[Exception], ...] = (
    NetworkError,
    APIRateLimitError,
    TemporaryServiceError,
)


def classify_error(error: Exception) -> Exception:
    """Map a raw exception onto the retryable error hierarchy by its message.

    Returns the original exception when it does not look transient.
    """
    if isinstance(error, RetryableError):
        return error

    text = str(error).lower()
    if "rate limit" in text or "429" in text or "quota" in text:
        return APIRateLimitError(f"Rate limit hit: {error}")
    if "network" in text or "connection" in text or "timed out" in text:
        return NetworkError(f"Network error: {error}")
    if "unavailable" in text or "503" in text or "502" in text:
        return TemporaryServiceError(f"Service unavailable: {error}")
    return error


def _backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    delay = min(base_delay * (2 ** attempt), max_delay)
    # Jitter keeps parallel callers from retrying in lockstep
    return delay + random.uniform(0, delay * 0.1)


def retry_api_call(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_on: Tuple[Type[Exception], ...] = RETRYABLE_ERRORS,
) -> Callable:
    """Decorator retrying a call on transient errors.

    Works on plain functions and on coroutine functions; coroutines wait
    with ``asyncio.sleep`` so the event loop stays free between attempts.

    Args:
        max_retries: Number of retries after the first attempt
        base_delay: Delay before the first retry, doubled on each retry
        max_delay: Upper bound for a single delay
        retry_on: Exception classes that trigger a retry
    """

    def next_delay(func: Callable, attempt: int, error: Exception) -> Optional[float]:
        if attempt >= max_retries:
            logger.error(f"{func.__name__} failed after {max_retries + 1} attempts: {error}")
            return None
        delay = _backoff_delay(attempt, base_delay, max_delay)
        logger.warning(
            f"{func.__name__} attempt {attempt + 1} failed ({error}), retrying in {delay:.1f}s"
        )
        return delay

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except retry_on as e:
                        delay = next_delay(func, attempt, e)
                        if delay is None:
                            raise
                        await asyncio.sleep(delay)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    delay = next_delay(func, attempt, e)
                    if delay is None:
                        raise
                    time.sleep(delay)

        return wrapper

    return decorator
