from .config import DashboardConfig, config
from .context import DashboardContext, create_context
from .errors import (ApiError, AuthenticationError, DashboardClientError, ErrorCode, FormValidationError,
                     NetworkError)
from .query_keys import create_query_key, query_keys

__all__ = [
    'ApiError',
    'AuthenticationError',
    'DashboardClientError',
    'DashboardConfig',
    'DashboardContext',
    'ErrorCode',
    'FormValidationError',
    'NetworkError',
    'config',
    'create_context',
    'create_query_key',
    'query_keys',
]
