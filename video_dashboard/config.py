"""
Centralized configuration for the video dashboard client.
Loads environment variables from a local .env file and provides type-safe accessors.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()


def get_env_var(key: str, default: Optional[str] = None) -> str:
    """Get environment variable with fallback to default"""
    return os.getenv(key, default)


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable with fallback to default"""
    value = get_env_var(key, str(default))
    try:
        return int(value)
    except ValueError:
        return default


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get float environment variable with fallback to default"""
    value = get_env_var(key, str(default))
    try:
        return float(value)
    except ValueError:
        return default


def get_env_list(key: str, default: str) -> List[str]:
    """Get comma separated environment variable as a list of stripped values"""
    return [item.strip() for item in get_env_var(key, default).split(",") if item.strip()]


# Cookie lifetime bounds in days
MIN_COOKIE_DAYS = 7
MAX_COOKIE_DAYS = 30


@dataclass
class DashboardConfig:
    """Configuration for the dashboard client core"""

    # Backend API
    API_BASE_URL: str = field(default_factory=lambda: get_env_var("API_BASE_URL", "http://localhost:8000/api/v1"))
    APP_BASE_URL: str = field(default_factory=lambda: get_env_var("APP_BASE_URL", "http://localhost:3000"))
    HTTP_TIMEOUT_SECS: float = field(default_factory=lambda: get_env_float("HTTP_TIMEOUT_SECS", 30.0))

    # Token persistence
    TOKEN_KEY: str = field(default_factory=lambda: get_env_var("TOKEN_KEY", "auth_token"))
    TOKEN_COOKIE_MAX_AGE_DAYS: int = field(default_factory=lambda: get_env_int("TOKEN_COOKIE_MAX_AGE_DAYS", 7))
    TOKEN_STORAGE_BACKEND: str = field(default_factory=lambda: get_env_var("TOKEN_STORAGE_BACKEND", "file"))
    TOKEN_STORAGE_PATH: str = field(default_factory=lambda: get_env_var(
        "TOKEN_STORAGE_PATH", os.path.join(os.path.expanduser("~"), ".video_dashboard", "storage.json")))
    REDIS_URL: str = field(default_factory=lambda: get_env_var("REDIS_URL", "redis://localhost:6379/0"))

    # Query retry policy
    QUERY_MAX_RETRIES: int = field(default_factory=lambda: get_env_int("QUERY_MAX_RETRIES", 3))
    QUERY_RETRY_BACKOFF_BASE: float = field(default_factory=lambda: get_env_float("QUERY_RETRY_BACKOFF_BASE", 2.0))
    QUERY_RETRY_MAX_DELAY_SECS: float = field(default_factory=lambda: get_env_float("QUERY_RETRY_MAX_DELAY_SECS", 30.0))

    # Staleness per domain (seconds)
    STALE_TIME_DEFAULT: float = field(default_factory=lambda: get_env_float("STALE_TIME_DEFAULT", 300.0))
    STALE_TIME_AUTH: float = field(default_factory=lambda: get_env_float("STALE_TIME_AUTH", 300.0))
    STALE_TIME_USERS: float = field(default_factory=lambda: get_env_float("STALE_TIME_USERS", 300.0))
    STALE_TIME_VIDEO_PROJECTS: float = field(default_factory=lambda: get_env_float("STALE_TIME_VIDEO_PROJECTS", 120.0))
    STALE_TIME_PROCESSING_STEPS: float = field(default_factory=lambda: get_env_float("STALE_TIME_PROCESSING_STEPS", 60.0))
    STALE_TIME_API_RESPONSES: float = field(default_factory=lambda: get_env_float("STALE_TIME_API_RESPONSES", 300.0))
    STALE_TIME_DASHBOARD_OVERVIEW: float = field(default_factory=lambda: get_env_float("STALE_TIME_DASHBOARD_OVERVIEW", 120.0))
    STALE_TIME_DASHBOARD_STATS: float = field(default_factory=lambda: get_env_float("STALE_TIME_DASHBOARD_STATS", 60.0))
    STALE_TIME_DASHBOARD_CHARTS: float = field(default_factory=lambda: get_env_float("STALE_TIME_DASHBOARD_CHARTS", 120.0))

    # Scheduled refresh per domain (seconds, 0 disables)
    REFRESH_INTERVAL_PROCESSING_STEPS: float = field(default_factory=lambda: get_env_float("REFRESH_INTERVAL_PROCESSING_STEPS", 5.0))
    REFRESH_INTERVAL_VIDEO_PROJECTS: float = field(default_factory=lambda: get_env_float("REFRESH_INTERVAL_VIDEO_PROJECTS", 0.0))
    REFRESH_INTERVAL_DASHBOARD: float = field(default_factory=lambda: get_env_float("REFRESH_INTERVAL_DASHBOARD", 0.0))

    # Route protection
    LOGIN_PATH: str = field(default_factory=lambda: get_env_var("LOGIN_PATH", "/login"))
    LANDING_PATH: str = field(default_factory=lambda: get_env_var("LANDING_PATH", "/overview"))
    PROTECTED_PREFIXES: List[str] = field(default_factory=lambda: get_env_list("PROTECTED_PREFIXES", "/overview,/details,/settings"))

    # Logging
    LOG_LEVEL: str = field(default_factory=lambda: get_env_var("LOG_LEVEL", "INFO"))
    LOG_FORMAT: str = field(default_factory=lambda: get_env_var("LOG_FORMAT", ""))

    @property
    def api_base_url(self) -> str:
        """API base URL without a trailing slash"""
        return self.API_BASE_URL.rstrip("/")

    @property
    def token_cookie_max_age(self) -> int:
        """Cookie max-age in seconds, clamped to the supported 7..30 day window"""
        days = min(max(self.TOKEN_COOKIE_MAX_AGE_DAYS, MIN_COOKIE_DAYS), MAX_COOKIE_DAYS)
        return days * 24 * 60 * 60

    @property
    def stale_times(self) -> Dict[str, float]:
        """Stale time lookup keyed by query domain (and dashboard sub-key)"""
        return {
            "auth": self.STALE_TIME_AUTH,
            "users": self.STALE_TIME_USERS,
            "video-projects": self.STALE_TIME_VIDEO_PROJECTS,
            "processing-steps": self.STALE_TIME_PROCESSING_STEPS,
            "api-responses": self.STALE_TIME_API_RESPONSES,
            "dashboard:overview": self.STALE_TIME_DASHBOARD_OVERVIEW,
            "dashboard:stats": self.STALE_TIME_DASHBOARD_STATS,
            "dashboard:charts": self.STALE_TIME_DASHBOARD_CHARTS,
        }

    @property
    def refresh_intervals(self) -> Dict[str, float]:
        """Scheduled refresh interval keyed by query domain"""
        return {
            "processing-steps": self.REFRESH_INTERVAL_PROCESSING_STEPS,
            "video-projects": self.REFRESH_INTERVAL_VIDEO_PROJECTS,
            "dashboard": self.REFRESH_INTERVAL_DASHBOARD,
        }


# Create global config instance
config = DashboardConfig()
