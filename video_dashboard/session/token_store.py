from typing import Optional

import httpx

from ..logging_config import configure_logging
from .token_storage import TokenStorage

logger = configure_logging("video-dashboard:token_store")


class TokenStore:
    """
    Keeps the bearer token in two places at once: a script-accessible storage
    backend and a cookie that request-time route checks can read. Both are
    always written and cleared together here.
    """

    def __init__(self, storage: TokenStorage, cookies: Optional[httpx.Cookies] = None,
                 key: str = "auth_token", max_age_seconds: int = 7 * 24 * 60 * 60):
        self.storage = storage
        self.cookies = cookies if cookies is not None else httpx.Cookies()
        self.key = key
        self.max_age_seconds = max_age_seconds
        self.token: Optional[str] = None

    async def persist_token(self, token: str) -> None:
        await self.storage.set(self.key, token)
        self.cookies.set(self.key, token, path="/")
        self.token = token
        logger.info("Auth token persisted", max_age=self.max_age_seconds)

    async def clear_token(self) -> None:
        await self.storage.delete(self.key)
        self.cookies.delete(self.key)
        self.token = None
        logger.info("Auth token cleared")

    async def read_token(self) -> Optional[str]:
        """Storage first, then the cookie"""
        token = await self.storage.get(self.key)
        if not token:
            token = self.cookies.get(self.key)
            if token:
                logger.debug("Auth token recovered from cookie")
        self.token = token or None
        return self.token

    def get_cached_token(self) -> Optional[str]:
        return self.token

    def cookie_header(self) -> Optional[str]:
        """Value of a ``Cookie`` request header carrying the token"""
        token = self.cookies.get(self.key)
        return f"{self.key}={token}" if token else None

    def set_cookie_header(self) -> Optional[str]:
        """Value of a ``Set-Cookie`` response header writing the token"""
        token = self.cookies.get(self.key)
        if not token:
            return None
        return f"{self.key}={token}; Path=/; Max-Age={self.max_age_seconds}; SameSite=Lax"

    def expire_cookie_header(self) -> str:
        """Value of a ``Set-Cookie`` response header removing the token"""
        return f"{self.key}=; Path=/; Max-Age=0; SameSite=Lax"
