import asyncio
from typing import Awaitable, Callable

from ..errors import ApiError, DashboardClientError
from ..logging_config import configure_logging

logger = configure_logging("video-dashboard:retry_policy")

# A missing resource or a rejected session will not fix itself on retry
NON_RETRYABLE_STATUSES = frozenset({401, 404})


class RetryPolicy:
    """Decides whether a failed query is attempted again and how long to wait"""

    def __init__(self, max_retries: int = 3, backoff_base: float = 2.0, max_delay: float = 30.0,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.max_delay = max_delay
        self.sleep = sleep

    def should_retry(self, failure_count: int, error: BaseException) -> bool:
        """
        Args:
            failure_count: Failures so far for this fetch, including ``error``
            error: The failure that just happened

        Returns:
            bool: True if another attempt should be made
        """
        if failure_count > self.max_retries:
            return False
        if isinstance(error, ApiError) and error.status in NON_RETRYABLE_STATUSES:
            return False
        if isinstance(error, DashboardClientError):
            return error.is_retryable
        return False

    def delay(self, attempt: int) -> float:
        """Exponential backoff for the given zero-based retry attempt, capped"""
        return min(self.backoff_base ** attempt, self.max_delay)

    async def wait(self, attempt: int) -> None:
        wait_time = self.delay(attempt)
        logger.debug("Waiting before retry", attempt=attempt + 1, wait_time=wait_time)
        await self.sleep(wait_time)


# Mutations are never retried automatically
NO_RETRY = RetryPolicy(max_retries=0)
