"""Unit tests for the route guard policy."""
from unittest.mock import MagicMock

import pytest

from video_dashboard.routing import ClientGuardOutcome, RouteAction, RouteGuard, path_matches
from video_dashboard.session import AuthState

pytestmark = pytest.mark.unit


@pytest.fixture
def guard():
    return RouteGuard(["/overview", "/details", "/settings"], login_path="/login", landing_path="/overview")


def _session(state=AuthState.AUTHENTICATED, authenticated=True, loading=False):
    session = MagicMock()
    session.state = state
    session.is_authenticated = authenticated
    session.is_loading = loading
    return session


class TestPathMatching:
    @pytest.mark.parametrize("path,expected", [
        ("/overview", True),
        ("/overview/", True),
        ("/overview/stats", True),
        ("/overviews", False),
        ("/", False),
    ])
    def test_segment_aware(self, path, expected):
        assert path_matches(path, "/overview") is expected

    def test_protected_paths(self, guard):
        assert guard.is_protected("/details/p1")
        assert guard.is_protected("/settings")
        assert not guard.is_protected("/login")
        assert not guard.is_protected("/")


class TestRequestCheck:
    def test_protected_without_token_redirects_to_login(self, guard):
        decision = guard.check_request("/details/p1", None)
        assert decision.action == RouteAction.REDIRECT
        assert decision.location == "/login"

    def test_protected_with_token_allowed(self, guard):
        assert not guard.check_request("/overview", "tok").is_redirect

    def test_login_with_token_redirects_to_landing(self, guard):
        decision = guard.check_request("/login", "tok")
        assert decision.is_redirect
        assert decision.location == "/overview"

    def test_login_without_token_allowed(self, guard):
        assert not guard.check_request("/login", None).is_redirect

    def test_public_path_allowed(self, guard):
        assert not guard.check_request("/", None).is_redirect
        assert not guard.check_request("/", "tok").is_redirect

    def test_empty_token_counts_as_missing(self, guard):
        assert guard.check_request("/settings", "").is_redirect


class TestClientCheck:
    def test_loading_before_hydration(self, guard):
        assert guard.check_client(_session(), hydrated=False) == ClientGuardOutcome.LOADING

    def test_loading_while_state_unknown(self, guard):
        session = _session(state=AuthState.UNKNOWN, authenticated=False)
        assert guard.check_client(session) == ClientGuardOutcome.LOADING

    def test_loading_while_request_in_flight(self, guard):
        session = _session(state=AuthState.UNAUTHENTICATED, authenticated=False, loading=True)
        assert guard.check_client(session) == ClientGuardOutcome.LOADING

    def test_redirect_when_unauthenticated(self, guard):
        session = _session(state=AuthState.UNAUTHENTICATED, authenticated=False)
        assert guard.check_client(session) == ClientGuardOutcome.REDIRECT

    def test_render_when_authenticated(self, guard):
        assert guard.check_client(_session()) == ClientGuardOutcome.RENDER
