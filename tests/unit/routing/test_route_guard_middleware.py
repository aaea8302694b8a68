"""
Tests for the request-time route guard middleware, driven through FastAPI's TestClient.
"""
import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from video_dashboard.config import config
from video_dashboard.routing import RouteGuard, add_route_guard_middleware

pytestmark = pytest.mark.unit


@pytest.fixture
def app():
    app = FastAPI()
    add_route_guard_middleware(app, RouteGuard(), cookie_name="auth_token")

    @app.get("/overview")
    async def overview():
        return PlainTextResponse("overview")

    @app.get("/details/{project_id}")
    async def details(project_id: str):
        return PlainTextResponse(f"details {project_id}")

    @app.get("/login")
    async def login():
        return PlainTextResponse("login")

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestRouteGuardMiddleware:
    def test_anonymous_protected_request_redirected(self, client):
        response = client.get("/details/p1", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/login"

    def test_signed_in_protected_request_served(self, client):
        client.cookies.set("auth_token", "tok")

        response = client.get("/details/p1", follow_redirects=False)

        assert response.status_code == 200
        assert response.text == "details p1"

    def test_signed_in_login_request_redirected(self, client):
        client.cookies.set("auth_token", "tok")

        response = client.get("/login", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/overview"

    def test_anonymous_login_request_served(self, client):
        response = client.get("/login", follow_redirects=False)
        assert response.status_code == 200

    def test_api_paths_skipped(self, client):
        response = client.get("/api/health", follow_redirects=False)
        assert response.status_code == 200

    def test_redirect_followed_to_login(self, client):
        response = client.get("/overview")
        assert response.text == "login"

    def test_cookie_name_follows_configured_token_key(self, monkeypatch):
        monkeypatch.setattr(config, "TOKEN_KEY", "session_token")
        app = FastAPI()
        add_route_guard_middleware(app, RouteGuard())

        @app.get("/overview")
        async def overview():
            return PlainTextResponse("overview")

        client = TestClient(app)
        client.cookies.set("session_token", "tok")

        response = client.get("/overview", follow_redirects=False)

        assert response.status_code == 200
        assert response.text == "overview"
