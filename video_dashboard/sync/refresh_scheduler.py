import asyncio
from typing import Awaitable, Callable, Dict, Optional

from ..errors import DashboardClientError
from ..logging_config import configure_logging
from ..query_keys import QueryKey
from .query_client import FetchFn, QueryClient

logger = configure_logging("video-dashboard:refresh_scheduler")


class RefreshScheduler:
    """Refetches selected queries on a fixed interval in the background"""

    def __init__(self, query_client: QueryClient,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.query_client = query_client
        self.sleep = sleep
        self._tasks: Dict[QueryKey, asyncio.Task] = {}

    def schedule(self, key: QueryKey, fetch_fn: FetchFn, interval: float,
                 stale_time: Optional[float] = None) -> bool:
        """Start (or restart) polling ``key``. An interval of 0 or less disables polling."""
        key = tuple(key)
        self.cancel(key)
        if interval <= 0:
            return False
        self._tasks[key] = asyncio.ensure_future(self._poll(key, fetch_fn, interval, stale_time))
        logger.info("Scheduled query refresh", key=key, interval=interval)
        return True

    async def _poll(self, key: QueryKey, fetch_fn: FetchFn, interval: float,
                    stale_time: Optional[float]) -> None:
        while True:
            await self.sleep(interval)
            try:
                await self.query_client.fetch_query(key, fetch_fn, stale_time=stale_time, force=True)
            except DashboardClientError as e:
                # The failure stays on the cache entry; keep polling
                logger.warning("Scheduled refresh failed", key=key, error=str(e))
            except Exception as e:
                logger.error("Scheduled refresh returned unreadable data", key=key, error=str(e))

    def is_scheduled(self, key: QueryKey) -> bool:
        task = self._tasks.get(tuple(key))
        return task is not None and not task.done()

    def cancel(self, key: QueryKey) -> bool:
        task = self._tasks.pop(tuple(key), None)
        if task is None:
            return False
        task.cancel()
        return True

    async def cancel_all(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
