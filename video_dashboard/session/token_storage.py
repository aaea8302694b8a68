"""
Script-accessible token storage backends.

Each backend is a small async key/value store. The file backend survives
process restarts on one machine; the Redis backend is shared between
processes and expires entries together with the cookie.
"""
import json
import os
from datetime import datetime, timezone
from typing import Dict, Optional

from redis import asyncio as redis_asyncio

from ..logging_config import configure_logging

logger = configure_logging("video-dashboard:token_storage")


class TokenStorage:
    """Async key/value interface implemented by every backend"""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class MemoryTokenStorage(TokenStorage):
    def __init__(self):
        self._values: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileTokenStorage(TokenStorage):
    """Stores values in a JSON object on disk"""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError:
            logger.warning("Token storage file is corrupt, ignoring it", path=self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, values: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(values, f)

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._save(values)

    async def delete(self, key: str) -> None:
        values = self._load()
        if key in values:
            del values[key]
            self._save(values)


class RedisTokenStorage(TokenStorage):
    """Stores values in Redis with an expiry matching the token cookie"""

    def __init__(self, redis_client, ttl_seconds: int, namespace: str = "video-dashboard"):
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds
        self.namespace = namespace

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int) -> "RedisTokenStorage":
        return cls(redis_asyncio.from_url(url, decode_responses=True), ttl_seconds)

    def _redis_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[str]:
        raw = await self.redis.get(self._redis_key(key))
        if not raw:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)["value"]
        except (ValueError, KeyError, TypeError):
            logger.warning("Unreadable token entry in Redis", key=key)
            return None

    async def set(self, key: str, value: str) -> None:
        payload = {"value": value, "stored_at": datetime.now(timezone.utc).isoformat()}
        try:
            await self.redis.setex(self._redis_key(key), self.ttl_seconds, json.dumps(payload))
        except Exception as e:
            logger.error("Failed to store token in Redis", error=str(e))
            raise
        logger.debug("Token stored in Redis", ttl=self.ttl_seconds)

    async def delete(self, key: str) -> None:
        await self.redis.delete(self._redis_key(key))

    async def close(self) -> None:
        await self.redis.aclose()


def create_token_storage(backend: str, path: Optional[str] = None, redis_url: Optional[str] = None,
                         ttl_seconds: int = 0) -> TokenStorage:
    """Build the storage backend named by configuration"""
    backend = (backend or "memory").lower()
    if backend == "memory":
        return MemoryTokenStorage()
    if backend == "file":
        if not path:
            raise ValueError("TOKEN_STORAGE_PATH is required for the file token storage backend")
        return FileTokenStorage(path)
    if backend == "redis":
        if not redis_url:
            raise ValueError("REDIS_URL is required for the redis token storage backend")
        return RedisTokenStorage.from_url(redis_url, ttl_seconds)
    raise ValueError(f"Unknown token storage backend: {backend}")
