from .auth_session import AuthSession, AuthState
from .token_storage import (FileTokenStorage, MemoryTokenStorage, RedisTokenStorage, TokenStorage,
                            create_token_storage)
from .token_store import TokenStore

__all__ = [
    'AuthSession',
    'AuthState',
    'FileTokenStorage',
    'MemoryTokenStorage',
    'RedisTokenStorage',
    'TokenStorage',
    'TokenStore',
    'create_token_storage',
]
