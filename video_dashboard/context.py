"""
Process-scoped dashboard context.

Everything that holds session or cache state lives on one object which is
passed to whatever needs it. ``start()`` hydrates the session from
persisted storage; ``close()`` stops background refreshes and releases the
HTTP client.
"""
from typing import Optional, Union

import httpx

from .api import (ApiResponsesApi, AuthApi, DashboardApi, ProcessingStepsApi, UsersApi, VideoProjectsApi,
                  download_url)
from .config import DashboardConfig
from .http_client import ApiClient
from .logging_config import configure_logging
from .models import DownloadFileType
from .routing import RouteGuard
from .session import AuthSession, AuthState, TokenStorage, TokenStore, create_token_storage
from .sync import QueryClient, RefreshScheduler, RetryPolicy

logger = configure_logging("video-dashboard:context")


class DashboardContext:
    def __init__(self, config: DashboardConfig, api_client: ApiClient, token_store: TokenStore,
                 query_client: QueryClient, refresh_scheduler: RefreshScheduler):
        self.config = config
        self.api_client = api_client
        self.token_store = token_store
        self.query_client = query_client
        self.refresh_scheduler = refresh_scheduler

        self.auth_api = AuthApi(api_client)
        self.users_api = UsersApi(api_client)
        self.video_projects_api = VideoProjectsApi(api_client)
        self.processing_steps_api = ProcessingStepsApi(api_client)
        self.api_responses_api = ApiResponsesApi(api_client)
        self.dashboard_api = DashboardApi(api_client)

        self.session = AuthSession(self.auth_api, token_store, query_client,
                                   stale_time=config.stale_times["auth"],
                                   refresh_scheduler=refresh_scheduler)
        self.route_guard = RouteGuard(config.PROTECTED_PREFIXES, config.LOGIN_PATH, config.LANDING_PATH)

        # Imported here to avoid a circular import with the queries facade
        from .queries import DashboardQueries
        self.queries = DashboardQueries(self)

    async def start(self) -> AuthState:
        state = await self.session.hydrate()
        logger.info("Dashboard context started", auth_state=state.value)
        return state

    async def close(self) -> None:
        await self.refresh_scheduler.cancel_all()
        await self.api_client.aclose()
        await self.token_store.storage.close()
        logger.info("Dashboard context closed")

    def download_url(self, project_id: str, file_type: Union[DownloadFileType, str]) -> str:
        return download_url(self.config.APP_BASE_URL, project_id, file_type)

    async def __aenter__(self) -> "DashboardContext":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_context(config: DashboardConfig, storage: Optional[TokenStorage] = None,
                   httpx_client: Optional[httpx.AsyncClient] = None,
                   cookies: Optional[httpx.Cookies] = None) -> DashboardContext:
    """Build a context from configuration; collaborators can be injected for tests"""
    if storage is None:
        storage = create_token_storage(
            config.TOKEN_STORAGE_BACKEND,
            path=config.TOKEN_STORAGE_PATH,
            redis_url=config.REDIS_URL,
            ttl_seconds=config.token_cookie_max_age,
        )
    token_store = TokenStore(storage, cookies=cookies, key=config.TOKEN_KEY,
                             max_age_seconds=config.token_cookie_max_age)

    api_client = ApiClient(config.api_base_url, token_provider=token_store.get_cached_token,
                           httpx_client=httpx_client, timeout=config.HTTP_TIMEOUT_SECS)

    retry_policy = RetryPolicy(
        max_retries=config.QUERY_MAX_RETRIES,
        backoff_base=config.QUERY_RETRY_BACKOFF_BASE,
        max_delay=config.QUERY_RETRY_MAX_DELAY_SECS,
    )
    query_client = QueryClient(retry_policy=retry_policy, default_stale_time=config.STALE_TIME_DEFAULT)

    return DashboardContext(config, api_client, token_store, query_client, RefreshScheduler(query_client))
