"""
Authentication state machine.

    unknown --hydrate--> unauthenticated | authenticated

The session is authenticated only while the identity query holds a user and
no error. A failed identity check does not erase the stored token; only
logout does that.
"""
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union

from ..api import AuthApi
from ..errors import ApiError, AuthenticationError, DashboardClientError
from ..logging_config import configure_logging
from ..models import AuthResponse, LoginCredentials, RegisterData, RegistrationForm, User
from ..query_keys import query_keys
from ..sync import NO_RETRY, Mutation, QueryClient, RefreshScheduler
from ..validation import ensure_valid_registration
from .token_store import TokenStore

logger = configure_logging("video-dashboard:auth_session")

StateListener = Callable[["AuthState"], None]


class AuthState(str, Enum):
    UNKNOWN = "unknown"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AuthSession:
    """Current-user identity plus the login, register and logout operations"""

    def __init__(self, auth_api: AuthApi, token_store: TokenStore, query_client: QueryClient,
                 stale_time: Optional[float] = None,
                 refresh_scheduler: Optional[RefreshScheduler] = None):
        self.auth_api = auth_api
        self.token_store = token_store
        self.query_client = query_client
        self.stale_time = stale_time
        self.refresh_scheduler = refresh_scheduler
        self._state = AuthState.UNKNOWN
        self._listeners: List[StateListener] = []

        self.login_mutation = Mutation(
            query_client, self._request_login,
            invalidates=[query_keys.auth.me()],
            on_success=self._on_login_success,
            name="login",
        )
        self.register_mutation = Mutation(query_client, self._request_register, name="register")

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> Optional[User]:
        return self.query_client.get_query_data(query_keys.auth.me())

    @property
    def error(self) -> Optional[BaseException]:
        return self.query_client.get_query_state(query_keys.auth.me()).error

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.error is None

    @property
    def is_loading(self) -> bool:
        identity = self.query_client.get_query_state(query_keys.auth.me())
        return identity.is_fetching or self.login_mutation.is_pending or self.register_mutation.is_pending

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state change listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: AuthState) -> None:
        if state == self._state:
            return
        previous, self._state = self._state, state
        logger.info("Auth state changed", previous=previous.value, state=state.value)
        for listener in list(self._listeners):
            listener(state)

    def _sync_state(self) -> None:
        self._set_state(AuthState.AUTHENTICATED if self.is_authenticated else AuthState.UNAUTHENTICATED)

    async def hydrate(self) -> AuthState:
        """Read the persisted token at start-up and resolve the identity"""
        token = await self.token_store.read_token()
        if not token:
            logger.debug("No persisted token")
            self._set_state(AuthState.UNAUTHENTICATED)
            return self._state
        return await self.refresh_identity()

    async def refresh_identity(self, force: bool = False) -> AuthState:
        if not self.token_store.get_cached_token():
            self._set_state(AuthState.UNAUTHENTICATED)
            return self._state
        try:
            await self.query_client.fetch_query(
                query_keys.auth.me(), self.auth_api.get_current_user,
                stale_time=self.stale_time, retry=NO_RETRY, force=force,
            )
        except DashboardClientError as e:
            # The token stays stored; only logout clears it
            logger.warning("Identity check failed", error=str(e))
        except Exception as e:
            # Malformed identity payload; recorded on the cache entry
            logger.error("Identity response could not be read", error=str(e))
        self._sync_state()
        return self._state

    async def _request_login(self, credentials: LoginCredentials) -> AuthResponse:
        try:
            return await self.auth_api.login(credentials)
        except ApiError as e:
            raise AuthenticationError(e.message or "Login failed", status=e.status) from e

    async def _on_login_success(self, response: AuthResponse, credentials: LoginCredentials) -> None:
        await self.token_store.persist_token(response.access_token)
        await self.refresh_identity(force=True)

    async def login(self, credentials: Union[LoginCredentials, Mapping[str, Any]]) -> AuthResponse:
        """
        Raises:
            AuthenticationError: The server rejected the credentials; carries its message.
            NetworkError: No response was received.
        """
        if not isinstance(credentials, LoginCredentials):
            credentials = LoginCredentials.model_validate(credentials)
        return await self.login_mutation.mutate_async(credentials)

    async def _request_register(self, user_data: RegisterData) -> User:
        try:
            return await self.auth_api.register(user_data)
        except ApiError as e:
            raise AuthenticationError(e.message or "Registration failed", status=e.status) from e

    async def register(self, user_data: Union[RegisterData, RegistrationForm, Mapping[str, Any]],
                       auto_login: bool = False) -> User:
        """Create an account. With ``auto_login`` the new credentials are used to log in right away."""
        if isinstance(user_data, RegistrationForm):
            ensure_valid_registration(user_data)
            user_data = user_data.to_register_data()
        elif not isinstance(user_data, RegisterData):
            user_data = RegisterData.model_validate(user_data)

        user = await self.register_mutation.mutate_async(user_data)
        if auto_login:
            await self.login(LoginCredentials(email=user_data.email, password=user_data.password))
        return user

    async def logout(self) -> None:
        """
        Stop background refreshes, then clear both token stores and every
        cached query. Safe to call without a session.
        """
        if self.refresh_scheduler is not None:
            await self.refresh_scheduler.cancel_all()
        await self.token_store.clear_token()
        self.query_client.clear()
        self.login_mutation.reset()
        self.register_mutation.reset()
        self._set_state(AuthState.UNAUTHENTICATED)
