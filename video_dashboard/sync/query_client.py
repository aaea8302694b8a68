"""
Request/cache engine shared by every screen.

A query key maps to one cache entry holding the last value, the last error
and when the value was fetched. Concurrent fetches of the same key share a
single in-flight task. Mutations invalidate key prefixes once they succeed.
"""
import asyncio
import time
from dataclasses import dataclass, field
from typing import (Any, Awaitable, Callable, Dict, Generic, Iterable, List, Optional,
                    Tuple, TypeVar, Union)

from ..errors import describe_error
from ..logging_config import configure_logging
from ..query_keys import QueryKey, is_prefix
from .retry_policy import RetryPolicy

logger = configure_logging("video-dashboard:query_client")

T = TypeVar("T")
FetchFn = Callable[[], Awaitable[Any]]


@dataclass
class QueryEntry:
    key: QueryKey
    data: Any = None
    has_data: bool = False
    error: Optional[BaseException] = None
    updated_at: Optional[float] = None
    stale_time: float = 0.0
    is_invalidated: bool = False
    failure_count: int = 0
    fetch_count: int = 0
    # Bumped by every invalidation; a fetch started under an older value is outdated
    generation: int = 0
    task_generation: int = 0
    task: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def is_fetching(self) -> bool:
        return self.task is not None and not self.task.done()

    def is_stale(self, now: float) -> bool:
        if self.is_invalidated or self.updated_at is None:
            return True
        return now - self.updated_at >= self.stale_time


@dataclass
class QueryResult(Generic[T]):
    """Snapshot of one query, mirroring what a screen renders from"""
    data: Optional[T] = None
    error: Optional[BaseException] = None
    is_loading: bool = False
    is_fetching: bool = False
    is_stale: bool = True
    updated_at: Optional[float] = None

    @property
    def is_success(self) -> bool:
        return self.error is None and not self.is_loading and self.updated_at is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class QueryClient:
    """Cache of query results keyed by query key"""

    def __init__(self, retry_policy: Optional[RetryPolicy] = None, default_stale_time: float = 0.0,
                 clock: Callable[[], float] = time.monotonic):
        self.retry_policy = retry_policy or RetryPolicy()
        self.default_stale_time = default_stale_time
        self.clock = clock
        self._entries: Dict[QueryKey, QueryEntry] = {}

    def _get_or_create(self, key: QueryKey) -> QueryEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = QueryEntry(key=key, stale_time=self.default_stale_time)
            self._entries[key] = entry
        return entry

    async def fetch_query(self, key: QueryKey, fetch_fn: FetchFn, stale_time: Optional[float] = None,
                          retry: Optional[RetryPolicy] = None, force: bool = False) -> Any:
        """
        Return fresh cached data, join an in-flight fetch of the same key, or fetch.

        Raises:
            Exception: The last failure once the retry policy gives up.
        """
        key = tuple(key)
        entry = self._get_or_create(key)
        entry.stale_time = self.default_stale_time if stale_time is None else stale_time

        if not force and entry.has_data and not entry.is_stale(self.clock()):
            logger.debug("Serving cached query", key=key)
            return entry.data

        if entry.is_fetching and entry.task_generation == entry.generation:
            logger.debug("Joining in-flight query", key=key)
        else:
            if entry.is_fetching:
                logger.debug("In-flight query predates invalidation, refetching", key=key)
            entry.task_generation = entry.generation
            entry.task = asyncio.ensure_future(
                self._run_fetch(entry, fetch_fn, retry or self.retry_policy, entry.generation))

        # Callers that go away must not cancel the fetch other callers share
        return await asyncio.shield(entry.task)

    async def _run_fetch(self, entry: QueryEntry, fetch_fn: FetchFn, policy: RetryPolicy,
                         generation: int) -> Any:
        failure_count = 0
        while True:
            entry.fetch_count += 1
            try:
                data = await fetch_fn()
            except Exception as e:
                failure_count += 1
                if generation == entry.generation:
                    entry.failure_count = failure_count
                if policy.should_retry(failure_count, e):
                    logger.warning("Query failed, retrying", key=entry.key,
                                   attempt=failure_count, error=str(e))
                    await policy.wait(failure_count - 1)
                    continue
                if generation == entry.generation:
                    entry.error = e
                logger.error("Query failed", key=entry.key, attempts=failure_count, error=str(e))
                raise

            if generation != entry.generation:
                # Invalidated mid-flight: the result may predate a mutation, so the entry stays stale
                logger.debug("Discarding outdated query result", key=entry.key)
                return data

            entry.data = data
            entry.has_data = True
            entry.error = None
            entry.failure_count = 0
            entry.is_invalidated = False
            entry.updated_at = self.clock()
            return data

    async def query(self, key: QueryKey, fetch_fn: FetchFn, stale_time: Optional[float] = None,
                    retry: Optional[RetryPolicy] = None, enabled: bool = True) -> QueryResult:
        """Like fetch_query, but failures are reported in the result instead of raised"""
        if not enabled:
            return self.get_query_state(key)
        try:
            await self.fetch_query(key, fetch_fn, stale_time=stale_time, retry=retry)
        except Exception:
            # Recorded on the cache entry by _run_fetch
            pass
        return self.get_query_state(key)

    def get_query_state(self, key: QueryKey) -> QueryResult:
        entry = self._entries.get(tuple(key))
        if entry is None:
            return QueryResult()
        return QueryResult(
            data=entry.data,
            error=entry.error,
            is_loading=entry.is_fetching and not entry.has_data,
            is_fetching=entry.is_fetching,
            is_stale=entry.is_stale(self.clock()),
            updated_at=entry.updated_at,
        )

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(tuple(key))
        return entry.data if entry else None

    def set_query_data(self, key: QueryKey, data: Any) -> None:
        entry = self._get_or_create(tuple(key))
        entry.data = data
        entry.has_data = True
        entry.error = None
        entry.is_invalidated = False
        entry.updated_at = self.clock()

    def find_entries(self, prefix: QueryKey) -> List[QueryEntry]:
        return [entry for key, entry in self._entries.items() if is_prefix(tuple(prefix), key)]

    def invalidate_queries(self, prefix: QueryKey) -> int:
        """Mark every entry under the prefix stale so the next read refetches"""
        entries = self.find_entries(prefix)
        for entry in entries:
            entry.is_invalidated = True
            entry.generation += 1
        logger.debug("Invalidated queries", prefix=tuple(prefix), count=len(entries))
        return len(entries)

    def remove_queries(self, prefix: QueryKey) -> int:
        keys = [entry.key for entry in self.find_entries(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        """Drop every cached entry"""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Query cache cleared", count=count)

    def __len__(self) -> int:
        return len(self._entries)


InvalidationSpec = Union[Iterable[QueryKey], Callable[..., Iterable[QueryKey]]]


class Mutation:
    """
    A state-changing call. Never retried. On success the listed key prefixes
    are invalidated before ``on_success`` runs and before the result is
    returned to the caller.
    """

    def __init__(self, client: QueryClient, mutation_fn: Callable[..., Awaitable[Any]],
                 invalidates: InvalidationSpec = (),
                 on_success: Optional[Callable[..., Awaitable[None]]] = None,
                 name: Optional[str] = None):
        self.client = client
        self.mutation_fn = mutation_fn
        self.invalidates = invalidates
        self.on_success = on_success
        self.name = name or getattr(mutation_fn, "__name__", "mutation")
        self.data: Any = None
        self.error: Optional[BaseException] = None
        self.error_message: Optional[str] = None
        self._pending = 0

    @property
    def is_pending(self) -> bool:
        return self._pending > 0

    def _prefixes(self, result: Any, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> List[QueryKey]:
        if callable(self.invalidates):
            return list(self.invalidates(result, *args, **kwargs))
        return list(self.invalidates)

    async def mutate_async(self, *args: Any, **kwargs: Any) -> Any:
        self._pending += 1
        self.error = None
        try:
            result = await self.mutation_fn(*args, **kwargs)
        except Exception as e:
            self.error = e
            self.error_message = describe_error(e)
            logger.warning("Mutation failed", mutation=self.name)
            raise
        finally:
            self._pending -= 1

        self.data = result
        for prefix in self._prefixes(result, args, kwargs):
            self.client.invalidate_queries(prefix)
        if self.on_success is not None:
            await self.on_success(result, *args, **kwargs)
        return result

    def reset(self) -> None:
        self.data = None
        self.error = None
        self.error_message = None
