"""
Read and write operations used by the dashboard screens.

Each read pairs a resource call with its query key and the stale time of its
domain. Each write is a Mutation that invalidates the keys it affects.
"""
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Union

from .logging_config import configure_logging
from .models import (ApiResponse, ProcessingStep, ProcessingStepUpdate, RetryResponse, User,
                     VideoProject, VideoProjectForm, VideoProjectUpdate)
from .query_keys import QueryKey, query_keys
from .sync import Mutation, QueryResult
from .validation import ensure_valid_project_form

if TYPE_CHECKING:
    from .context import DashboardContext

logger = configure_logging("video-dashboard:queries")

ConfirmFn = Callable[[str], bool]

DELETE_PROJECT_PROMPT = "Are you sure you want to delete this project? This action cannot be undone."
RETRY_PROJECT_PROMPT = "Retry processing this project from the failed step?"
DELETE_USER_PROMPT = "Are you sure you want to delete this user?"


def _confirmed(confirm: Optional[ConfirmFn], prompt: str) -> bool:
    return confirm is None or bool(confirm(prompt))


class DashboardQueries:
    """Query and mutation operations over the shared cache"""

    def __init__(self, context: "DashboardContext"):
        self.context = context
        self.client = context.query_client
        self.stale_times: Dict[str, float] = context.config.stale_times

        self.update_user_mutation = Mutation(
            self.client, self._update_user,
            invalidates=lambda user, user_id, data: [query_keys.users.all(), query_keys.users.detail(user_id)],
            name="update_user",
        )
        self.delete_user_mutation = Mutation(
            self.client, context.users_api.delete,
            invalidates=[query_keys.users.all()],
            name="delete_user",
        )
        self.create_project_mutation = Mutation(
            self.client, context.video_projects_api.create,
            invalidates=[query_keys.video_projects.all()],
            name="create_video_project",
        )
        self.update_project_mutation = Mutation(
            self.client, context.video_projects_api.update,
            invalidates=lambda project, project_id, data: [
                query_keys.video_projects.all(), query_keys.video_projects.detail(project_id)],
            name="update_video_project",
        )
        self.delete_project_mutation = Mutation(
            self.client, context.video_projects_api.delete,
            invalidates=[query_keys.video_projects.all()],
            name="delete_video_project",
        )
        self.retry_project_mutation = Mutation(
            self.client, context.video_projects_api.retry,
            invalidates=[query_keys.video_projects.all()],
            name="retry_video_project",
        )
        self.update_step_mutation = Mutation(
            self.client, context.processing_steps_api.update,
            invalidates=lambda step, step_id, data: [
                query_keys.processing_steps.all(), query_keys.processing_steps.detail(step_id)],
            name="update_processing_step",
        )

    async def _read(self, key: QueryKey, fetch_fn, stale_key: Optional[str] = None) -> QueryResult:
        stale_time = self.stale_times.get(stale_key or key[0])
        return await self.client.query(key, fetch_fn, stale_time=stale_time)

    # Users

    async def users(self, params: Optional[Mapping[str, Any]] = None) -> QueryResult[List[User]]:
        return await self._read(query_keys.users.list(params), lambda: self.context.users_api.get_all(params))

    async def user(self, user_id: str) -> QueryResult[User]:
        if not user_id:
            return QueryResult()
        return await self._read(query_keys.users.detail(user_id),
                                lambda: self.context.users_api.get_by_id(user_id))

    async def _update_user(self, user_id: str, data: Mapping[str, Any]) -> User:
        return await self.context.users_api.update(user_id, data)

    async def update_user(self, user_id: str, data: Mapping[str, Any]) -> User:
        return await self.update_user_mutation.mutate_async(user_id, data)

    async def delete_user(self, user_id: str, confirm: Optional[ConfirmFn] = None) -> bool:
        if not _confirmed(confirm, DELETE_USER_PROMPT):
            logger.info("User deletion cancelled", user_id=user_id)
            return False
        await self.delete_user_mutation.mutate_async(user_id)
        return True

    # Video projects

    async def video_projects(self, params: Optional[Mapping[str, Any]] = None) -> QueryResult[List[VideoProject]]:
        return await self._read(query_keys.video_projects.list(params),
                                lambda: self.context.video_projects_api.get_all(params))

    async def video_project(self, project_id: str) -> QueryResult[VideoProject]:
        if not project_id:
            return QueryResult()
        return await self._read(query_keys.video_projects.detail(project_id),
                                lambda: self.context.video_projects_api.get_by_id(project_id))

    async def user_video_projects(self, user_id: str) -> QueryResult[List[VideoProject]]:
        if not user_id:
            return QueryResult()
        return await self._read(query_keys.video_projects.by_user(user_id),
                                lambda: self.context.video_projects_api.get_by_user(user_id))

    async def create_video_project(self, form: VideoProjectForm) -> VideoProject:
        """Validate locally, then submit. Raises FormValidationError without a network call."""
        ensure_valid_project_form(form)
        return await self.create_project_mutation.mutate_async(form)

    async def update_video_project(self, project_id: str,
                                   data: Union[VideoProjectUpdate, Mapping[str, Any]]) -> VideoProject:
        if not isinstance(data, VideoProjectUpdate):
            data = VideoProjectUpdate.model_validate(data)
        return await self.update_project_mutation.mutate_async(project_id, data)

    async def delete_video_project(self, project_id: str, confirm: Optional[ConfirmFn] = None) -> bool:
        if not _confirmed(confirm, DELETE_PROJECT_PROMPT):
            logger.info("Project deletion cancelled", project_id=project_id)
            return False
        await self.delete_project_mutation.mutate_async(project_id)
        self.context.refresh_scheduler.cancel(query_keys.processing_steps.by_project(project_id))
        return True

    async def retry_video_project(self, project_id: str,
                                  confirm: Optional[ConfirmFn] = None) -> Union[RetryResponse, bool]:
        if not _confirmed(confirm, RETRY_PROJECT_PROMPT):
            logger.info("Project retry cancelled", project_id=project_id)
            return False
        return await self.retry_project_mutation.mutate_async(project_id)

    # Processing steps

    async def processing_steps(self, params: Optional[Mapping[str, Any]] = None) -> QueryResult[List[ProcessingStep]]:
        return await self._read(query_keys.processing_steps.list(params),
                                lambda: self.context.processing_steps_api.get_all(params))

    async def processing_step(self, step_id: str) -> QueryResult[ProcessingStep]:
        if not step_id:
            return QueryResult()
        return await self._read(query_keys.processing_steps.detail(step_id),
                                lambda: self.context.processing_steps_api.get_by_id(step_id))

    async def project_processing_steps(self, project_id: str) -> QueryResult[List[ProcessingStep]]:
        if not project_id:
            return QueryResult()
        return await self._read(query_keys.processing_steps.by_project(project_id),
                                lambda: self.context.processing_steps_api.get_by_project(project_id))

    async def update_processing_step(self, step_id: str,
                                     data: Union[ProcessingStepUpdate, Mapping[str, Any]]) -> ProcessingStep:
        if not isinstance(data, ProcessingStepUpdate):
            data = ProcessingStepUpdate.model_validate(data)
        return await self.update_step_mutation.mutate_async(step_id, data)

    def watch_processing_steps(self, project_id: str, interval: Optional[float] = None) -> bool:
        """Keep a project's steps refreshing in the background while it is being viewed"""
        if interval is None:
            interval = self.context.config.refresh_intervals["processing-steps"]
        return self.context.refresh_scheduler.schedule(
            query_keys.processing_steps.by_project(project_id),
            lambda: self.context.processing_steps_api.get_by_project(project_id),
            interval,
            stale_time=self.stale_times.get("processing-steps"),
        )

    def unwatch_processing_steps(self, project_id: str) -> bool:
        return self.context.refresh_scheduler.cancel(query_keys.processing_steps.by_project(project_id))

    # API response audit log

    async def api_responses(self, params: Optional[Mapping[str, Any]] = None) -> QueryResult[List[ApiResponse]]:
        return await self._read(query_keys.api_responses.list(params),
                                lambda: self.context.api_responses_api.get_all(params))

    async def api_response(self, response_id: str) -> QueryResult[ApiResponse]:
        if not response_id:
            return QueryResult()
        return await self._read(query_keys.api_responses.detail(response_id),
                                lambda: self.context.api_responses_api.get_by_id(response_id))

    async def project_api_responses(self, project_id: str) -> QueryResult[List[ApiResponse]]:
        if not project_id:
            return QueryResult()
        return await self._read(query_keys.api_responses.by_project(project_id),
                                lambda: self.context.api_responses_api.get_by_project(project_id))

    # Dashboard

    async def dashboard_overview(self) -> QueryResult[Dict[str, Any]]:
        return await self._read(query_keys.dashboard.overview(), self.context.dashboard_api.get_overview,
                                stale_key="dashboard:overview")

    async def dashboard_stats(self) -> QueryResult[Dict[str, Any]]:
        return await self._read(query_keys.dashboard.stats(), self.context.dashboard_api.get_stats,
                                stale_key="dashboard:stats")

    async def dashboard_charts(self, chart_type: str) -> QueryResult[Dict[str, Any]]:
        return await self._read(query_keys.dashboard.charts(chart_type),
                                lambda: self.context.dashboard_api.get_chart_data(chart_type),
                                stale_key="dashboard:charts")
