"""Unit tests for configuration loading."""
import pytest

from video_dashboard.config import DashboardConfig, get_env_float, get_env_int, get_env_list

pytestmark = pytest.mark.unit


class TestEnvHelpers:
    def test_int_and_float_fall_back_on_garbage(self, monkeypatch):
        monkeypatch.setenv("DASH_TEST_INT", "abc")
        monkeypatch.setenv("DASH_TEST_FLOAT", "1.5")
        assert get_env_int("DASH_TEST_INT", 7) == 7
        assert get_env_float("DASH_TEST_FLOAT", 0.0) == 1.5

    def test_list(self, monkeypatch):
        monkeypatch.setenv("DASH_TEST_LIST", " /a, /b ,,")
        assert get_env_list("DASH_TEST_LIST", "") == ["/a", "/b"]


class TestDashboardConfig:
    def test_defaults(self, monkeypatch):
        for name in ("API_BASE_URL", "PROTECTED_PREFIXES", "TOKEN_COOKIE_MAX_AGE_DAYS"):
            monkeypatch.delenv(name, raising=False)

        config = DashboardConfig()

        assert config.api_base_url == "http://localhost:8000/api/v1"
        assert config.PROTECTED_PREFIXES == ["/overview", "/details", "/settings"]
        assert config.token_cookie_max_age == 7 * 24 * 60 * 60

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://api.example.com/v2/")
        monkeypatch.setenv("STALE_TIME_PROCESSING_STEPS", "15")

        config = DashboardConfig()

        assert config.api_base_url == "https://api.example.com/v2"
        assert config.stale_times["processing-steps"] == 15.0

    @pytest.mark.parametrize("days,expected_days", [(1, 7), (14, 14), (90, 30)])
    def test_cookie_max_age_clamped(self, days, expected_days):
        config = DashboardConfig(TOKEN_COOKIE_MAX_AGE_DAYS=days)
        assert config.token_cookie_max_age == expected_days * 86400

    def test_frequently_changing_domains_go_stale_sooner(self):
        stale_times = DashboardConfig().stale_times
        assert stale_times["processing-steps"] < stale_times["video-projects"] < stale_times["users"]
        assert stale_times["dashboard:stats"] < stale_times["dashboard:overview"]
