"""
Navigation policy shared by the request-time check and the after-mount check.
"""
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional

from ..logging_config import configure_logging

if TYPE_CHECKING:
    from ..session import AuthSession

logger = configure_logging("video-dashboard:route_guard")


def path_matches(path: str, prefix: str) -> bool:
    """Segment-aware prefix test: /overview matches /overview/1 but not /overviews"""
    prefix = prefix.rstrip("/") or "/"
    if prefix == "/":
        return path.startswith("/")
    return path == prefix or path.startswith(prefix + "/")


class RouteAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class RouteDecision:
    action: RouteAction
    location: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.action == RouteAction.REDIRECT


ALLOW = RouteDecision(RouteAction.ALLOW)


class ClientGuardOutcome(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"


class RouteGuard:
    def __init__(self, protected_prefixes: Iterable[str] = ("/overview", "/details", "/settings"),
                 login_path: str = "/login", landing_path: str = "/overview"):
        self.protected_prefixes: List[str] = list(protected_prefixes)
        self.login_path = login_path
        self.landing_path = landing_path

    def is_protected(self, path: str) -> bool:
        return any(path_matches(path, prefix) for prefix in self.protected_prefixes)

    def is_login_page(self, path: str) -> bool:
        return path_matches(path, self.login_path)

    def check_request(self, path: str, token: Optional[str]) -> RouteDecision:
        """Decision for a request before the page is served, from the cookie token alone"""
        if self.is_protected(path) and not token:
            logger.debug("Redirecting anonymous request to login", path=path)
            return RouteDecision(RouteAction.REDIRECT, self.login_path)
        if self.is_login_page(path) and token:
            logger.debug("Redirecting signed-in request away from login", path=path)
            return RouteDecision(RouteAction.REDIRECT, self.landing_path)
        return ALLOW

    def check_client(self, session: "AuthSession", hydrated: bool = True) -> ClientGuardOutcome:
        """Outcome for a protected screen once it is mounted"""
        from ..session import AuthState

        if not hydrated or session.state == AuthState.UNKNOWN or session.is_loading:
            return ClientGuardOutcome.LOADING
        if not session.is_authenticated:
            return ClientGuardOutcome.REDIRECT
        return ClientGuardOutcome.RENDER
