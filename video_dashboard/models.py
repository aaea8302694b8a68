import mimetypes
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

from .progress import ProjectProgress


class User(BaseModel):
    email: str
    full_name: Optional[str] = None
    is_active: bool = True


class LoginCredentials(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class RegisterData(BaseModel):
    email: str
    full_name: str
    password: str


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, value: Any) -> "ProjectStatus":
        """Unrecognized statuses display as draft"""
        try:
            return cls(value)
        except ValueError:
            return cls.DRAFT

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return STATUS_COLORS[self]


STATUS_COLORS = {
    ProjectStatus.DRAFT: "gray",
    ProjectStatus.PROCESSING: "blue",
    ProjectStatus.READY: "green",
    ProjectStatus.FAILED: "red",
    ProjectStatus.ARCHIVED: "gray",
}


class DownloadFileType(str, Enum):
    FINAL_VIDEO = "final_video"
    VIDEO_WITH_AUDIO = "video_with_audio"
    AUDIO = "audio"
    SCRIPT = "script"


class VideoProject(BaseModel):
    """Schema for a video project as returned by the backend"""
    id: str
    user_id: str
    status: str
    user_context: Optional[str] = None
    voice: str
    script_style: str
    animation_style: str
    caption_position: str
    min_words: int
    max_words: int
    created_at: datetime
    updated_at: datetime
    error_message: Optional[str] = None
    progress: Optional[ProjectProgress] = None
    results: Optional[Dict[str, Any]] = None

    @field_validator("progress", mode="before")
    @classmethod
    def _parse_progress(cls, value: Any) -> Any:
        if value is None or isinstance(value, ProjectProgress):
            return value
        if isinstance(value, dict) and "steps" in value and isinstance(value["steps"], list):
            return value
        return ProjectProgress.from_mapping(value)

    @property
    def project_status(self) -> ProjectStatus:
        return ProjectStatus.parse(self.status)

    @property
    def progress_percentage(self) -> int:
        return self.progress.percentage if self.progress else 0

    @property
    def can_retry(self) -> bool:
        return self.project_status == ProjectStatus.FAILED


class VideoProjectUpdate(BaseModel):
    """Partial update; only fields explicitly set are sent"""
    status: Optional[str] = None
    user_context: Optional[str] = None
    voice: Optional[str] = None
    script_style: Optional[str] = None
    animation_style: Optional[str] = None
    caption_position: Optional[str] = None
    min_words: Optional[int] = None
    max_words: Optional[int] = None


class ProcessingStep(BaseModel):
    id: str
    video_project_id: str
    step_name: str
    status: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    step_data: Optional[Any] = None


class ProcessingStepUpdate(BaseModel):
    status: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    step_data: Optional[Any] = None


class ApiResponse(BaseModel):
    """Audit record of one call the backend pipeline made to an external service"""
    id: str
    video_project_id: str
    step_name: str
    service: str
    request_data: Optional[Any] = None
    response_data: Optional[Any] = None
    created_at: datetime


class RetryResponse(BaseModel):
    message: str
    project_id: str


class UploadFile(BaseModel):
    """A file selected for upload"""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "UploadFile":
        file_path = Path(path)
        guessed, _ = mimetypes.guess_type(file_path.name)
        return cls(
            filename=file_path.name,
            content=file_path.read_bytes(),
            content_type=content_type or guessed or "application/octet-stream",
        )


# Choices offered by the project creation form
VOICE_OPTIONS = ["nova", "alloy", "echo", "fable", "onyx", "shimmer"]
SCRIPT_STYLE_OPTIONS = ["narrative", "conversational", "promotional", "educational", "storytelling"]
ANIMATION_STYLE_OPTIONS = ["dynamic", "subtle", "energetic", "minimal"]
CAPTION_POSITION_OPTIONS = ["center", "top", "bottom"]


class VideoProjectForm(BaseModel):
    """Fields submitted when creating a project"""
    user_context: str = ""
    voice: str = "nova"
    script_style: str = "narrative"
    animation_style: str = "dynamic"
    caption_position: str = "center"
    min_words: int = 2
    max_words: int = 4
    video_file: Optional[UploadFile] = None
    music_file: Optional[UploadFile] = None

    def scalar_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"video_file", "music_file"}, exclude_none=True)


class RegistrationForm(BaseModel):
    email: str = ""
    full_name: str = ""
    password: str = ""
    confirm_password: str = ""

    def to_register_data(self) -> RegisterData:
        return RegisterData(email=self.email, full_name=self.full_name, password=self.password)

