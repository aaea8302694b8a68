from typing import Any, List, Mapping, Optional

from ..models import User
from .base import ResourceApi


class UsersApi(ResourceApi):
    async def get_all(self, params: Optional[Mapping[str, Any]] = None) -> List[User]:
        return self._parse_list(User, await self.client.get("/users", params))

    async def get_by_id(self, user_id: str) -> User:
        return self._parse(User, await self.client.get(f"/users/{user_id}"))

    async def update(self, user_id: str, data: Mapping[str, Any]) -> User:
        return self._parse(User, await self.client.put(f"/users/{user_id}", body=dict(data)))

    async def delete(self, user_id: str) -> None:
        await self.client.delete(f"/users/{user_id}")
