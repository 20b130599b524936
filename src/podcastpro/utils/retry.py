"""Retry helpers for calls to the text-generation API.

Errors from the Gemini client are sorted into transient ones, which are
retried with exponential backoff, and permanent ones, which are not.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """A failed API call worth trying again."""


class RateLimitError(RetryableError):
    """Rate limit or quota exhausted for now."""


class ServerError(RetryableError):
    """Timeout, dropped connection or server-side failure."""


class NonRetryableError(Exception):
    """A failed API call that will fail the same way if repeated (bad key, bad request)."""


# Lowercase fragments of client error messages, checked in order
ERROR_MARKERS: list[tuple[type[RetryableError], tuple[str, ...]]] = [
    (RateLimitError, ("429", "rate limit", "too many requests", "resource exhausted")),
    (
        ServerError,
        (
            "timeout",
            "timed out",
            "deadline",
            "connection",
            "network",
            "unavailable",
            "internal",
            "500",
            "503",
        ),
    ),
]


@dataclass(frozen=True)
class RetryConfig:
    """Backoff settings.

    Attributes:
        max_attempts: Total attempts, including the first call
        max_wait_seconds: Upper bound on a single wait
        min_wait_seconds: First wait
        jitter: Randomize waits
    """

    max_attempts: int = 3
    max_wait_seconds: float = 10
    min_wait_seconds: float = 1
    jitter: bool = True


DEFAULT_RETRY_CONFIG = RetryConfig()

# Near-zero waits so tests don't sleep
TEST_RETRY_CONFIG = RetryConfig(max_wait_seconds=0.1, min_wait_seconds=0.01, jitter=False)


def _log_attempt(retry_state: RetryCallState) -> None:
    if retry_state.outcome and retry_state.outcome.failed:
        exception = retry_state.outcome.exception()
        logger.warning(
            f"Attempt {retry_state.attempt_number} failed, retrying: "
            f"{type(exception).__name__}: {exception}"
        )


def with_retry(
    config: RetryConfig | None = None,
    retry_on: tuple[type[Exception], ...] = (RetryableError,),
) -> Callable:
    """Decorate a function so ``retry_on`` errors are retried with backoff.

    The last error is re-raised once attempts run out.

    Example:
        >>> @with_retry(config=RetryConfig(max_attempts=2))
        ... def call():
        ...     ...
    """
    config = config or DEFAULT_RETRY_CONFIG

    def decorator(func: Callable) -> Callable:
        retrying = retry(
            stop=stop_after_attempt(config.max_attempts),
            wait=wait_exponential_jitter(
                initial=config.min_wait_seconds,
                max=config.max_wait_seconds,
                jitter=config.max_wait_seconds if config.jitter else 0,
            ),
            retry=retry_if_exception_type(retry_on),
            before_sleep=_log_attempt,
            reraise=True,
        )
        return wraps(func)(retrying(func))

    return decorator


def classify_api_error(exception: Exception) -> Exception:
    """Wrap a client exception as retryable or not, based on its message."""
    message = str(exception)
    lowered = message.lower()

    for error_type, markers in ERROR_MARKERS:
        if any(marker in lowered for marker in markers):
            return error_type(message)

    return NonRetryableError(message)
