from typing import Any, List, Mapping, Optional

from ..models import ApiResponse
from .base import ResourceApi


class ApiResponsesApi(ResourceApi):
    """Read-only access to the audit log of external service calls"""

    async def get_all(self, params: Optional[Mapping[str, Any]] = None) -> List[ApiResponse]:
        return self._parse_list(ApiResponse, await self.client.get("/api-responses", params))

    async def get_by_id(self, response_id: str) -> ApiResponse:
        return self._parse(ApiResponse, await self.client.get(f"/api-responses/{response_id}"))

    async def get_by_project(self, project_id: str) -> List[ApiResponse]:
        data = await self.client.get(f"/video-projects/{project_id}/api-responses")
        return self._parse_list(ApiResponse, data)
