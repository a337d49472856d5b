"""
Retry helper for Google API calls.

Transient failures (rate limits, quota, timeouts, unavailable backends) are
retried with exponential backoff; everything else fails immediately.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

RETRYABLE_MESSAGES = (
    "rate limit",
    "ratelimit",
    "quota",
    "timeout",
    "timed out",
    "service unavailable",
    "backend error",
)


def is_retryable_error(error: BaseException) -> bool:
    """
    Decide whether an error is worth retrying.

    Args:
        error: Exception raised by an API call

    Returns:
        True for rate-limit, quota, timeout and unavailability errors
    """
    if isinstance(error, HttpError) and error.resp.status in RETRYABLE_STATUS_CODES:
        return True

    if isinstance(error, TimeoutError):
        return True

    message = str(error).lower()
    return any(marker in message for marker in RETRYABLE_MESSAGES)


def execute_with_retry(call: Callable[[], T], operation_name: str, max_retries: int = 3,
                       initial_delay: float = 1.0,
                       sleep: Optional[Callable[[float], None]] = None) -> T:
    """
    Run ``call`` with bounded retries and exponential backoff.

    Args:
        call: Zero-argument callable performing the API request
        operation_name: Description used in log messages
        max_retries: Maximum number of attempts
        initial_delay: Seconds to wait before the second attempt; doubles each time
        sleep: Sleep function, ``time.sleep`` by default

    Returns:
        Whatever ``call`` returns

    Raises:
        Exception: The last error, once attempts are exhausted or when the
            error is not retryable
    """
    sleep = sleep or time.sleep
    delay = initial_delay

    for attempt in range(1, max_retries + 1):
        try:
            return call()
        except Exception as e:
            if not is_retryable_error(e):
                logger.error(f"{operation_name} failed with non-retryable error: {e}")
                raise

            if attempt == max_retries:
                logger.error(f"{operation_name} failed after {max_retries} attempts: {e}")
                raise

            logger.warning(
                f"{operation_name} attempt {attempt}/{max_retries} failed: {e}. "
                f"Retrying in {delay:g}s"
            )
            sleep(delay)
            delay *= 2

    raise ValueError("max_retries must be at least 1")
