"""
End-to-end flow through a fully wired DashboardContext against a faked backend.
"""
import httpx
import pytest

from video_dashboard.config import DashboardConfig
from video_dashboard.context import create_context
from video_dashboard.routing import ClientGuardOutcome
from video_dashboard.session import AuthState, FileTokenStorage

from conftest import BASE_URL, FakeBackend, make_project, make_user

pytestmark = pytest.mark.integration


def _authorized(request: httpx.Request) -> bool:
    return request.headers.get("authorization") == "Bearer tok-1"


@pytest.fixture
def backend():
    backend = FakeBackend()
    backend.add("POST", "/auth/login", json_body={"access_token": "tok-1", "token_type": "bearer"})
    backend.add_handler("GET", "/auth/me", lambda request: (
        httpx.Response(200, json=make_user()) if _authorized(request)
        else httpx.Response(401, json={"detail": "Not authenticated"})))
    backend.add_handler("GET", "/video-projects", lambda request: (
        httpx.Response(200, json=[make_project()]) if _authorized(request)
        else httpx.Response(401, json={"detail": "Not authenticated"})))
    return backend


class TestDashboardFlow:
    @pytest.mark.asyncio
    async def test_login_browse_logout(self, context, backend):
        assert await context.start() == AuthState.UNAUTHENTICATED
        assert context.route_guard.check_client(context.session) == ClientGuardOutcome.REDIRECT

        await context.session.login({"email": "jane@example.com", "password": "secret1"})
        assert context.session.state == AuthState.AUTHENTICATED
        assert context.route_guard.check_client(context.session) == ClientGuardOutcome.RENDER
        assert not context.route_guard.check_request("/overview", context.token_store.cookies.get("auth_token")).is_redirect

        projects = await context.queries.video_projects()
        assert projects.data[0].id == "p1"

        await context.session.logout()
        assert len(context.query_client) == 0
        assert context.route_guard.check_request("/overview", context.token_store.cookies.get("auth_token")).is_redirect

        # Requests after logout go out without a token
        result = await context.queries.video_projects()
        assert result.error.status == 401

    @pytest.mark.asyncio
    async def test_session_survives_restart_with_file_storage(self, backend, tmp_path):
        config = DashboardConfig(API_BASE_URL=BASE_URL, TOKEN_STORAGE_BACKEND="file",
                                 TOKEN_STORAGE_PATH=str(tmp_path / "storage.json"),
                                 QUERY_RETRY_MAX_DELAY_SECS=0.0)

        async with httpx.AsyncClient(transport=httpx.MockTransport(backend)) as httpx_client:
            first = create_context(config, httpx_client=httpx_client)
            assert isinstance(first.token_store.storage, FileTokenStorage)
            await first.start()
            await first.session.login({"email": "jane@example.com", "password": "secret1"})
            await first.close()

            async with create_context(config, httpx_client=httpx_client) as second:
                assert second.session.state == AuthState.AUTHENTICATED
                assert second.session.user.email == "jane@example.com"

    @pytest.mark.asyncio
    async def test_download_url(self, context):
        assert context.download_url("p1", "script") == "http://testserver/api/videos/p1/download/script"
