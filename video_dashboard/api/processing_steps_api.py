from typing import Any, List, Mapping, Optional

from ..models import ProcessingStep, ProcessingStepUpdate
from .base import ResourceApi


class ProcessingStepsApi(ResourceApi):
    async def get_all(self, params: Optional[Mapping[str, Any]] = None) -> List[ProcessingStep]:
        return self._parse_list(ProcessingStep, await self.client.get("/processing-steps", params))

    async def get_by_id(self, step_id: str) -> ProcessingStep:
        return self._parse(ProcessingStep, await self.client.get(f"/processing-steps/{step_id}"))

    async def get_by_project(self, project_id: str) -> List[ProcessingStep]:
        data = await self.client.get(f"/video-projects/{project_id}/processing-steps")
        return self._parse_list(ProcessingStep, data)

    async def update(self, step_id: str, data: ProcessingStepUpdate) -> ProcessingStep:
        body = data.model_dump(mode="json", exclude_unset=True)
        return self._parse(ProcessingStep, await self.client.put(f"/processing-steps/{step_id}", body=body))
