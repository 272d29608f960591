"""GitHub API retry utilities with configurable delays."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from monosync.gateway.time.abc import Time

logger = logging.getLogger(__name__)

# Default retry delays for transient error retry (exponential backoff)
RETRY_DELAYS = [0.5, 1.0]

T = TypeVar("T")


class ShouldRetry(Exception):
    """Raised by a callback to signal that the operation should be retried."""


def with_github_retry(
    time: Time,
    operation_name: str,
    fn: Callable[[], T],
    retry_delays: list[float] | None = None,
) -> T:
    """Execute fn, retrying while it raises ShouldRetry.

    Any other exception bubbles up immediately (permanent failure). Only the
    production transport uses this; the sync core never retries.

    Args:
        time: Time abstraction for sleep operations
        operation_name: Description for logging
        fn: Function to execute. Raises ShouldRetry to retry.
        retry_delays: Custom delays. Defaults to [0.5, 1.0].

    Returns:
        Result from the first successful call

    Raises:
        ShouldRetry: If all retry attempts are exhausted
    """
    delays = retry_delays if retry_delays is not None else RETRY_DELAYS

    for attempt in range(len(delays) + 1):
        try:
            result = fn()
            if attempt > 0:
                logger.info("Success on retry %d: %s", attempt, operation_name)
            return result
        except ShouldRetry as e:
            if attempt == len(delays):
                logger.warning(
                    "Failed after %d attempts: %s: %s", len(delays) + 1, operation_name, e
                )
                raise

            delay = delays[attempt]
            logger.info("Retry %d after %ss: %s: %s", attempt + 1, delay, operation_name, e)
            time.sleep(delay)

    msg = "Retry logic error"
    raise AssertionError(msg)
