"""Retry logic with exponential backoff for transient Confluence API failures.

This module retries calls that fail with a rate limit (429) or a server
error (5xx). It waits 1s, 2s, 4s between attempts (capped at 60s) and fails
fast for every other error, including network-level failures.
"""

import time
import logging
from typing import Callable, TypeVar

from .errors import APIError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3
MAX_BACKOFF_SECONDS = 60


def backoff(attempt: int) -> int:
    """Return the pause in seconds before the retry following `attempt`.

    Args:
        attempt: Zero-based attempt number that just failed

    Returns:
        min(2 ** attempt, 60)
    """
    return min(2 ** attempt, MAX_BACKOFF_SECONDS)


def retry_on_transient(func: Callable[..., T], *args, **kwargs) -> T:
    """Retry function on 429 or 5xx API errors with exponential backoff.

    Executes the given function with the provided arguments, retrying up to 3
    times (4 attempts in total). The arguments are passed unchanged on every
    attempt, so a request body is re-sent as-is. There is no jitter.

    Args:
        func: The function to execute with retry logic
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        The return value of the function

    Raises:
        APIError: The last transient error once retries are exhausted
        Other exceptions: Passed through immediately without retry

    Example:
        >>> body = retry_on_transient(transport._send_once, "GET", url)
    """
    for retry_num in range(MAX_RETRIES + 1):  # 0, 1, 2, 3 = 4 attempts total
        try:
            return func(*args, **kwargs)
        except APIError as e:
            if not _is_transient_error(e):
                raise

            if retry_num >= MAX_RETRIES:
                logger.error(
                    f"HTTP {e.status_code} persisted after {MAX_RETRIES} retries, giving up"
                )
                raise

            wait_time = backoff(retry_num)
            logger.info(
                f"HTTP {e.status_code}, retrying in {wait_time}s "
                f"(retry {retry_num + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    # Unreachable: the last iteration either returns or raises
    raise AssertionError("retry loop exited without result")


def _is_transient_error(exception: Exception) -> bool:
    """Check if an exception is an API error worth retrying (429 or 5xx)."""
    return isinstance(exception, APIError) and exception.is_retryable
