"""
Request-time route protection for the server that serves the dashboard pages.
"""
from typing import Callable, Iterable, Optional

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from ..config import config
from ..logging_config import configure_logging
from .route_guard import RouteGuard, path_matches

logger = configure_logging("video-dashboard:route_guard_middleware")

EXCLUDED_PREFIXES = ("/api", "/_next/static", "/_next/image", "/favicon.ico", "/static")


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Redirects with 307 according to the token cookie on the incoming request"""

    def __init__(self, app, guard: RouteGuard, cookie_name: Optional[str] = None,
                 excluded_prefixes: Iterable[str] = EXCLUDED_PREFIXES):
        super().__init__(app)
        self.guard = guard
        self.cookie_name = cookie_name or config.TOKEN_KEY
        self.excluded_prefixes = tuple(excluded_prefixes)

    async def dispatch(self, request: Request, call_next: Callable):
        path = request.url.path
        if any(path_matches(path, prefix) for prefix in self.excluded_prefixes):
            return await call_next(request)

        token = request.cookies.get(self.cookie_name)
        decision = self.guard.check_request(path, token)
        if decision.is_redirect:
            logger.info("Route guard redirect", path=path, location=decision.location)
            return RedirectResponse(decision.location, status_code=307)
        return await call_next(request)


def add_route_guard_middleware(app: FastAPI, guard: RouteGuard, cookie_name: Optional[str] = None) -> None:
    """
    Add the route guard to a FastAPI application.

    Args:
        app: The FastAPI application instance
        guard: Policy deciding which paths need a token
        cookie_name: Cookie holding the bearer token; defaults to TOKEN_KEY
    """
    app.add_middleware(RouteGuardMiddleware, guard=guard, cookie_name=cookie_name)
