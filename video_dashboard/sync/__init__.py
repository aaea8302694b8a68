from .query_client import Mutation, QueryClient, QueryEntry, QueryResult
from .refresh_scheduler import RefreshScheduler
from .retry_policy import NO_RETRY, RetryPolicy

__all__ = [
    'Mutation',
    'NO_RETRY',
    'QueryClient',
    'QueryEntry',
    'QueryResult',
    'RefreshScheduler',
    'RetryPolicy',
]
