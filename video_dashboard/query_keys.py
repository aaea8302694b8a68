"""
Query key factory for consistent cache key management.

Keys are tuples laid out as (domain, qualifier, discriminators...). The
domain key, e.g. ``("video-projects",)``, is a prefix of every key in that
domain, so invalidating it reaches every cached entry of the domain. New
keys must keep the domain as their first element.
"""
from typing import Any, Mapping, Optional, Tuple

QueryKey = Tuple[Any, ...]


class FrozenParams(tuple):
    """Hashable, order-independent form of a filter mapping"""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FrozenParams) and tuple.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = tuple.__hash__

    def to_dict(self) -> dict:
        return {key: value for key, value in self}

    def __repr__(self) -> str:
        return f"FrozenParams({self.to_dict()!r})"


def freeze(value: Any) -> Any:
    """Recursively convert mappings and sequences into hashable equivalents.

    None entries are dropped from mappings because they are never sent.
    Booleans become "true"/"false", matching their query string form.
    """
    if isinstance(value, FrozenParams):
        return value
    if isinstance(value, Mapping):
        items = [(str(key), freeze(item)) for key, item in value.items() if item is not None]
        return FrozenParams(sorted(items, key=lambda pair: pair[0]))
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def freeze_params(params: Optional[Mapping[str, Any]]) -> Optional[FrozenParams]:
    """Freeze a filter object; no filter, an empty filter and an all-None filter are the same"""
    if params is None:
        return None
    frozen = freeze(params)
    return frozen if frozen else None


def create_query_key(base_key: QueryKey, *additional_keys: Any) -> QueryKey:
    return tuple(base_key) + tuple(freeze(key) for key in additional_keys)


def is_prefix(prefix: QueryKey, key: QueryKey) -> bool:
    return len(prefix) <= len(key) and tuple(key[:len(prefix)]) == tuple(prefix)


def domain_of(key: QueryKey) -> str:
    return key[0]


class AuthKeys:
    DOMAIN = "auth"

    def all(self) -> QueryKey:
        return (self.DOMAIN,)

    def me(self) -> QueryKey:
        return (self.DOMAIN, "me")


class _ResourceKeys:
    DOMAIN = ""

    def all(self) -> QueryKey:
        return (self.DOMAIN,)

    def list(self, params: Optional[Mapping[str, Any]] = None) -> QueryKey:
        return (self.DOMAIN, "list", freeze_params(params))

    def detail(self, resource_id: str) -> QueryKey:
        return (self.DOMAIN, "detail", resource_id)


class UserKeys(_ResourceKeys):
    DOMAIN = "users"


class VideoProjectKeys(_ResourceKeys):
    DOMAIN = "video-projects"

    def by_user(self, user_id: str) -> QueryKey:
        return (self.DOMAIN, "user", user_id)


class ProcessingStepKeys(_ResourceKeys):
    DOMAIN = "processing-steps"

    def by_project(self, project_id: str) -> QueryKey:
        return (self.DOMAIN, "project", project_id)


class ApiResponseKeys(_ResourceKeys):
    DOMAIN = "api-responses"

    def by_project(self, project_id: str) -> QueryKey:
        return (self.DOMAIN, "project", project_id)


class DashboardKeys:
    DOMAIN = "dashboard"

    def all(self) -> QueryKey:
        return (self.DOMAIN,)

    def overview(self) -> QueryKey:
        return (self.DOMAIN, "overview")

    def stats(self) -> QueryKey:
        return (self.DOMAIN, "stats")

    def charts(self, chart_type: str) -> QueryKey:
        return (self.DOMAIN, "charts", chart_type)


class SettingsKeys:
    DOMAIN = "settings"

    def all(self) -> QueryKey:
        return (self.DOMAIN,)

    def general(self) -> QueryKey:
        return (self.DOMAIN, "general")

    def billing(self) -> QueryKey:
        return (self.DOMAIN, "billing")

    def users(self) -> QueryKey:
        return (self.DOMAIN, "users")


class QueryKeys:
    auth = AuthKeys()
    users = UserKeys()
    video_projects = VideoProjectKeys()
    processing_steps = ProcessingStepKeys()
    api_responses = ApiResponseKeys()
    dashboard = DashboardKeys()
    settings = SettingsKeys()


query_keys = QueryKeys()
