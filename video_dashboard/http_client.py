"""
HTTP client for the dashboard backend.

Builds authenticated requests, serializes JSON and multipart bodies and
normalizes every failure into ApiError / NetworkError.
"""
import asyncio
import json
import time
import uuid
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

import httpx

from .errors import ApiError, ErrorCode, NetworkError
from .logging_config import configure_logging, set_request_id
from .models import UploadFile

logger = configure_logging("video-dashboard:http_client")

TokenProvider = Callable[[], Optional[str]]


def stringify_param(value: Any) -> str:
    """Render a scalar the way it appears in a query string or form field"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """Serialize every non-None entry, in insertion order"""
    if not params:
        return ""
    pairs = [(key, stringify_param(value)) for key, value in params.items() if value is not None]
    return urlencode(pairs)


def with_query(path: str, params: Optional[Mapping[str, Any]]) -> str:
    query = build_query_string(params)
    return f"{path}?{query}" if query else path


class MultipartBody:
    """Form fields plus files, sent as multipart/form-data"""

    def __init__(self, fields: Optional[Mapping[str, Any]] = None,
                 files: Optional[Mapping[str, Optional[UploadFile]]] = None):
        self.fields: Dict[str, str] = {
            key: stringify_param(value) for key, value in (fields or {}).items() if value is not None
        }
        self.files: Dict[str, Tuple[str, bytes, str]] = {
            key: (upload.filename, upload.content, upload.content_type)
            for key, upload in (files or {}).items() if upload is not None
        }


def _extract_error_message(response: httpx.Response) -> str:
    fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
    try:
        data = json.loads(response.text)
    except ValueError:
        return fallback
    if not isinstance(data, dict):
        return fallback
    for field in ("detail", "message"):
        value = data.get(field)
        if value:
            return value if isinstance(value, str) else json.dumps(value)
    return fallback


class ApiClient:
    """Client for the dashboard REST backend"""

    def __init__(self, base_url: str, token_provider: Optional[TokenProvider] = None,
                 httpx_client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider
        self.timeout = timeout
        self._injected_client = httpx_client
        self._client: Optional[httpx.AsyncClient] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client, or one bound to the running event loop"""
        if self._injected_client is not None:
            return self._injected_client

        current_loop = asyncio.get_running_loop()
        if self._client is not None and (self._client.is_closed or self._loop is not current_loop):
            logger.debug("Recreating AsyncClient", closed=self._client.is_closed)
            self._client = None

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._loop = current_loop
        return self._client

    def _build_headers(self, body: Any, headers: Optional[Mapping[str, str]]) -> httpx.Headers:
        request_headers = httpx.Headers()
        if not isinstance(body, MultipartBody):
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)
        if isinstance(body, MultipartBody) and "content-type" in request_headers:
            # httpx writes the multipart content type together with its boundary
            del request_headers["content-type"]

        token = self.token_provider() if self.token_provider else None
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        return request_headers

    async def request(self, endpoint: str, method: str = "GET", body: Any = None,
                      headers: Optional[Mapping[str, str]] = None,
                      params: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Send a request and return the parsed JSON body ({} for an empty body).

        Raises:
            ApiError: On a non-success status or a body that is not valid JSON.
            NetworkError: If no HTTP response was received.
        """
        endpoint = with_query(endpoint, params)
        url = f"{self.base_url}{endpoint}"
        request_headers = self._build_headers(body, headers)

        kwargs: Dict[str, Any] = {}
        if isinstance(body, MultipartBody):
            kwargs["data"] = body.fields
            kwargs["files"] = body.files
        elif body is not None:
            kwargs["content"] = json.dumps(body, default=str)

        set_request_id(uuid.uuid4().hex[:12])
        try:
            return await self._send(method, endpoint, url, request_headers, kwargs)
        finally:
            set_request_id(None)

    async def _send(self, method: str, endpoint: str, url: str, request_headers: httpx.Headers,
                    kwargs: Dict[str, Any]) -> Any:
        start_time = time.time()
        try:
            response = await self._get_client().request(method, url, headers=request_headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("Request timed out", method=method, endpoint=endpoint, error=str(e))
            raise NetworkError(f"Request to {endpoint} timed out", timeout=True) from e
        except httpx.RequestError as e:
            logger.error("Request failed with network error", method=method, endpoint=endpoint, error=str(e))
            raise NetworkError(f"Network error while requesting {endpoint}: {e}") from e

        latency = time.time() - start_time
        logger.debug("API request completed", method=method, endpoint=endpoint,
                     status_code=response.status_code, latency=f"{latency:.3f}")

        if not response.is_success:
            message = _extract_error_message(response)
            logger.warning("API request returned error status", method=method, endpoint=endpoint,
                           status_code=response.status_code, message=message)
            raise ApiError(message, response.status_code, response.reason_phrase)

        text = response.text
        if not text:
            return {}

        try:
            return json.loads(text)
        except ValueError:
            logger.error("API response is not valid JSON", method=method, endpoint=endpoint)
            raise ApiError("Invalid JSON response", response.status_code, response.reason_phrase,
                           error_code=ErrorCode.INVALID_RESPONSE)

    async def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.request(endpoint, params=params)

    async def post(self, endpoint: str, body: Any = None) -> Any:
        return await self.request(endpoint, method="POST", body=body)

    async def put(self, endpoint: str, body: Any = None) -> Any:
        return await self.request(endpoint, method="PUT", body=body)

    async def delete(self, endpoint: str) -> Any:
        return await self.request(endpoint, method="DELETE")

    async def aclose(self) -> None:
        """Close the internally created client; an injected client is left to its owner"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
        self._loop = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
