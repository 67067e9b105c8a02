"""Retry utilities for AI API calls with exponential backoff."""
import logging
from typing import Callable, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 1
DEFAULT_MAX_WAIT_SECONDS = 10


def is_retryable_error(exception: BaseException) -> bool:
    """
    Determine if an exception is worth retrying.

    Rate limits, 5xx responses, timeouts and connection failures are
    transient. Authentication, bad requests and quota errors are not.
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__.lower()

    if "ratelimit" in exception_type or ("rate" in error_str and "limit" in error_str):
        return True
    if "429" in error_str:
        return True

    if any(code in error_str for code in ["500", "502", "503", "504", "529"]):
        return True
    if "overloaded" in error_str:
        return True

    if "timeout" in exception_type or "timeout" in error_str or "timed out" in error_str:
        return True

    if "connection" in error_str or "connect" in exception_type:
        return True

    return False


def create_retry_decorator(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait_seconds: float = DEFAULT_MIN_WAIT_SECONDS,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Create a retry decorator with exponential backoff.

    Only errors accepted by is_retryable_error are retried; the last
    error is re-raised once attempts run out.
    """
    return retry(
        retry=retry_if_exception(is_retryable_error),
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(
            multiplier=1,
            min=min_wait_seconds,
            max=max_wait_seconds,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
