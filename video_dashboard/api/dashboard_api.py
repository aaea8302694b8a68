from typing import Any, Dict

from .base import ResourceApi


class DashboardApi(ResourceApi):
    async def get_overview(self) -> Dict[str, Any]:
        return await self.client.get("/dashboard/overview")

    async def get_stats(self) -> Dict[str, Any]:
        return await self.client.get("/dashboard/stats")

    async def get_chart_data(self, chart_type: str) -> Dict[str, Any]:
        return await self.client.get(f"/dashboard/charts/{chart_type}")
