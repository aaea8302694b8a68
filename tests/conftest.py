"""
Shared fixtures. The backend is faked with httpx.MockTransport so every
test runs without a network.
"""
import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
import pytest_asyncio

from video_dashboard.config import DashboardConfig
from video_dashboard.context import create_context
from video_dashboard.http_client import ApiClient
from video_dashboard.session import MemoryTokenStorage

BASE_URL = "http://testserver/api/v1"
API_PREFIX = "/api/v1"

RouteResult = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Routes requests by (method, path) and records every request it sees"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Tuple[int, Any, Optional[str]]]] = {}
        self.handlers: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json_body: Any = None,
            text: Optional[str] = None) -> None:
        """Queue a response. The last queued response for a route is repeated."""
        self.routes.setdefault((method.upper(), path), []).append((status, json_body, text))

    def add_handler(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handlers[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        key = (request.method, path)

        if key in self.handlers:
            return self.handlers[key](request)

        queued = self.routes.get(key)
        if not queued:
            return httpx.Response(404, json={"detail": "Not Found"})
        status, json_body, text = queued.pop(0) if len(queued) > 1 else queued[0]
        if text is not None:
            return httpx.Response(status, text=text)
        if json_body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=json_body)

    def calls(self, method: str, path: str) -> int:
        return sum(
            1 for request in self.requests
            if request.method == method.upper() and request.url.path == f"{API_PREFIX}{path}"
        )

    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request().content)


def make_user(email: str = "jane@example.com", full_name: Optional[str] = "Jane Doe") -> Dict[str, Any]:
    return {"email": email, "full_name": full_name, "is_active": True}


def make_project(project_id: str = "p1", status: str = "ready", **overrides: Any) -> Dict[str, Any]:
    project = {
        "id": project_id,
        "user_id": "u1",
        "status": status,
        "user_context": "Product demo",
        "voice": "nova",
        "script_style": "narrative",
        "animation_style": "dynamic",
        "caption_position": "center",
        "min_words": 2,
        "max_words": 4,
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:05:00Z",
        "progress": None,
        "results": None,
    }
    project.update(overrides)
    return project


def make_step(step_id: str = "s1", step_name: str = "video_analysis", status: str = "completed",
              project_id: str = "p1") -> Dict[str, Any]:
    return {
        "id": step_id,
        "video_project_id": project_id,
        "step_name": step_name,
        "status": status,
        "started_at": None,
        "completed_at": None,
        "error_message": None,
        "step_data": None,
    }


@pytest.fixture
def backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def httpx_client(backend):
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    yield client
    await client.aclose()


@pytest.fixture
def api_client(httpx_client):
    return ApiClient(BASE_URL, httpx_client=httpx_client)


@pytest.fixture
def test_config(tmp_path):
    """Configuration isolated from the environment; retries never sleep"""
    return DashboardConfig(
        API_BASE_URL=BASE_URL,
        APP_BASE_URL="http://testserver",
        TOKEN_STORAGE_BACKEND="memory",
        TOKEN_STORAGE_PATH=str(tmp_path / "storage.json"),
        QUERY_MAX_RETRIES=3,
        QUERY_RETRY_MAX_DELAY_SECS=0.0,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def token_storage():
    return MemoryTokenStorage()


@pytest_asyncio.fixture
async def context(test_config, httpx_client, token_storage):
    ctx = create_context(test_config, storage=token_storage, httpx_client=httpx_client)
    yield ctx
    await ctx.close()
