"""Unit tests for RetryPolicy."""
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from video_dashboard.errors import ApiError, FormValidationError, NetworkError
from video_dashboard.models import User
from video_dashboard.sync import NO_RETRY, RetryPolicy

pytestmark = pytest.mark.unit


def _validation_error():
    try:
        User.model_validate({"is_active": True})
    except ValidationError as e:
        return e
    raise AssertionError("expected a validation error")


class TestRetryPolicy:
    @pytest.fixture
    def policy(self):
        return RetryPolicy(max_retries=3, backoff_base=2.0, max_delay=30.0, sleep=AsyncMock())

    @pytest.mark.parametrize("status", [401, 404])
    def test_never_retries_unauthorized_or_missing(self, policy, status):
        assert not policy.should_retry(1, ApiError("nope", status, "x"))

    @pytest.mark.parametrize("status", [500, 502, 503, 429])
    def test_retries_server_side_failures(self, policy, status):
        assert policy.should_retry(1, ApiError("busy", status, "x"))

    def test_retries_network_failures(self, policy):
        assert policy.should_retry(2, NetworkError("offline"))
        assert policy.should_retry(1, NetworkError("slow", timeout=True))

    def test_does_not_retry_client_errors(self, policy):
        assert not policy.should_retry(1, ApiError("bad", 400, "Bad Request"))
        assert not policy.should_retry(1, FormValidationError({"max_words": "too small"}))

    def test_does_not_retry_unexpected_errors(self, policy):
        assert not policy.should_retry(1, _validation_error())

    def test_bounded_by_max_retries(self, policy):
        error = ApiError("busy", 500, "Internal Server Error")
        assert policy.should_retry(3, error)
        assert not policy.should_retry(4, error)

    def test_no_retry_policy(self):
        assert not NO_RETRY.should_retry(1, NetworkError("offline"))

    def test_delay_is_exponential_and_capped(self, policy):
        assert [policy.delay(attempt) for attempt in range(6)] == [1.0, 2.0, 4.0, 8.0, 16.0, 30.0]

    @pytest.mark.asyncio
    async def test_wait_uses_injected_sleep(self, policy):
        await policy.wait(2)
        policy.sleep.assert_awaited_once_with(4.0)
