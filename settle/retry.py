"""Retry decorator for status probes.

The waiter engine never retries a failed probe: a probe error ends the
wait. Transient request failures (throttling, dropped connections) are
the probe's own concern, and probes wrap their single API call with
this decorator.

Example:
    from settle.retry import on_error_code, retry

    @retry(on=on_error_code("ThrottlingException"))
    async def describe():
        return await client.describe_cluster(name=name)
"""

from __future__ import annotations

import asyncio
import functools
import random
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from botocore.exceptions import ClientError
from loguru import logger

P = ParamSpec("P")
T = TypeVar("T")

type RetryPredicate = Callable[[Exception], bool]

THROTTLING_ERROR_CODES = (
    "Throttling",
    "ThrottlingException",
    "TooManyRequestsException",
    "RequestLimitExceeded",
)


def retry(
    on: type[Exception] | tuple[type[Exception], ...] | RetryPredicate = Exception,
    max_attempts: int = 5,
    base_delay: float = 1.0,
    exponential_base: float = 2.0,
    max_delay: float = 20.0,
    jitter: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator that retries an async call with exponential backoff.

    Args:
        on: Exception class, tuple of classes, or predicate selecting
            which failures are retried.
        max_attempts: Maximum number of attempts (including the first one).
        base_delay: Delay in seconds before the first retry.
        exponential_base: Multiplier for exponential backoff.
        max_delay: Maximum delay cap in seconds.
        jitter: Whether to add up to 10% random jitter to each delay.
    """
    if isinstance(on, type) and issubclass(on, Exception):
        should_retry: RetryPredicate = lambda e: isinstance(e, on)
    elif isinstance(on, tuple):
        should_retry = lambda e: isinstance(e, on)
    else:
        should_retry = on

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e) or attempt >= max_attempts - 1:
                        raise

                    delay = min(base_delay * (exponential_base**attempt), max_delay)
                    if jitter:
                        delay += random.uniform(0, delay * 0.1)

                    logger.warning(
                        f"Retry {attempt + 1}/{max_attempts} after {type(e).__name__}: "
                        f"{e}. Waiting {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)

            raise AssertionError("unreachable")

        return wrapper

    return decorator


# =============================================================================
# Predicates
# =============================================================================


def error_code(e: BaseException) -> str | None:
    """Return the AWS error code of a botocore ClientError, else None."""
    if isinstance(e, ClientError):
        return e.response.get("Error", {}).get("Code")
    return None


def on_error_code(*codes: str) -> RetryPredicate:
    """Create a predicate that retries on specific AWS error codes.

    Example:
        @retry(on=on_error_code("ThrottlingException", "TooManyRequestsException"))
        async def describe():
            ...
    """

    def predicate(e: Exception) -> bool:
        return error_code(e) in codes

    return predicate


def on_exception_message(*patterns: str, case_sensitive: bool = False) -> RetryPredicate:
    """Create a predicate that retries when the exception message matches a pattern."""

    def predicate(e: Exception) -> bool:
        msg = str(e)
        if not case_sensitive:
            msg = msg.lower()
            return any(p.lower() in msg for p in patterns)
        return any(p in msg for p in patterns)

    return predicate


def any_of(*predicates: RetryPredicate) -> RetryPredicate:
    """Combine predicates with OR logic (retry if ANY predicate matches)."""

    def combined(e: Exception) -> bool:
        return any(p(e) for p in predicates)

    return combined


transient = any_of(
    on_error_code(*THROTTLING_ERROR_CODES),
    on_exception_message("connection reset", "read timeout"),
)
