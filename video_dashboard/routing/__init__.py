from .middleware import RouteGuardMiddleware, add_route_guard_middleware
from .route_guard import ClientGuardOutcome, RouteAction, RouteDecision, RouteGuard, path_matches

__all__ = [
    'ClientGuardOutcome',
    'RouteAction',
    'RouteDecision',
    'RouteGuard',
    'RouteGuardMiddleware',
    'add_route_guard_middleware',
    'path_matches',
]
