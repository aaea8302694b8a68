from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

from ..http_client import MultipartBody
from ..logging_config import configure_logging
from ..models import RetryResponse, VideoProject, VideoProjectForm, VideoProjectUpdate
from ..validation import ensure_valid_project_form
from .base import ResourceApi

logger = configure_logging("video-dashboard:video_projects_api")


class VideoProjectsApi(ResourceApi):
    async def get_all(self, params: Optional[Mapping[str, Any]] = None) -> List[VideoProject]:
        return self._parse_list(VideoProject, await self.client.get("/video-projects", params))

    async def get_by_id(self, project_id: str) -> VideoProject:
        return self._parse(VideoProject, await self.client.get(f"/video-projects/{project_id}"))

    async def get_by_user(self, user_id: str) -> List[VideoProject]:
        return self._parse_list(VideoProject, await self.client.get(f"/users/{user_id}/video-projects"))

    async def create(self, form: VideoProjectForm) -> VideoProject:
        """
        Submit a new project as one multipart request.

        Raises:
            FormValidationError: If the form is invalid; nothing is sent.
        """
        ensure_valid_project_form(form)
        body = MultipartBody(
            fields=form.scalar_fields(),
            files={"video_file": form.video_file, "music_file": form.music_file},
        )
        logger.info("Creating video project",
                    video_file=form.video_file.filename,
                    has_music=form.music_file is not None)
        return self._parse(VideoProject, await self.client.post("/video-projects", body=body))

    async def update(self, project_id: str, data: VideoProjectUpdate) -> VideoProject:
        body = data.model_dump(exclude_unset=True)
        return self._parse(VideoProject, await self.client.put(f"/video-projects/{project_id}", body=body))

    async def delete(self, project_id: str) -> None:
        await self.client.delete(f"/video-projects/{project_id}")

    async def retry(self, project_id: str) -> RetryResponse:
        return self._parse(RetryResponse, await self.client.post(f"/video-projects/{project_id}/retry"))

    async def iter_pages(self, params: Optional[Mapping[str, Any]] = None,
                         start_page: int = 0) -> AsyncIterator[List[VideoProject]]:
        """Yield successive pages (``page`` query parameter) until an empty page"""
        page = start_page
        while True:
            page_params: Dict[str, Any] = {**(params or {}), "page": page}
            projects = await self.get_all(page_params)
            if not projects:
                return
            yield projects
            page += 1
