"""
Processing progress for a video project.

The backend reports progress as a loose mapping of step name to
``{"status": ..., "message": ...}``. It is parsed here into a closed set of
variants: one per canonical pipeline step plus a catch-all for step names
this client does not know about. Only canonical steps count towards the
completion percentage.
"""
import math
from enum import Enum
from typing import Annotated, Any, Dict, Iterable, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator


class StepName(str, Enum):
    """Canonical pipeline steps, in execution order"""
    VIDEO_ANALYSIS = "video_analysis"
    SCRIPT_GENERATION = "script_generation"
    AUDIO_GENERATION = "audio_generation"
    AUDIO_SYNC = "audio_sync"
    VIDEO_COMPOSITION = "video_composition"
    CAPTION_RENDERING = "caption_rendering"

    @property
    def label(self) -> str:
        return STEP_DESCRIPTIONS[self][0]

    @property
    def description(self) -> str:
        return STEP_DESCRIPTIONS[self][1]


STEP_SEQUENCE: List[StepName] = list(StepName)

STEP_DESCRIPTIONS = {
    StepName.VIDEO_ANALYSIS: ("Video Analysis", "Analyzing video content with AI"),
    StepName.SCRIPT_GENERATION: ("Script Generation", "Creating voiceover script"),
    StepName.AUDIO_GENERATION: ("Audio Generation", "Generating voiceover audio"),
    StepName.AUDIO_SYNC: ("Audio Sync", "Synchronizing audio with video"),
    StepName.VIDEO_COMPOSITION: ("Video Composition", "Composing final video"),
    StepName.CAPTION_RENDERING: ("Caption Rendering", "Adding captions to video"),
}


class StepStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: Any) -> "StepStatus":
        """Unrecognized or missing statuses read as pending"""
        try:
            return cls(value)
        except ValueError:
            return cls.PENDING


class _StepProgressBase(BaseModel):
    status: StepStatus = StepStatus.PENDING
    message: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> StepStatus:
        return StepStatus.parse(value)


class KnownStepProgress(_StepProgressBase):
    """Progress of one canonical pipeline step"""
    kind: Literal["known"] = "known"
    step: StepName


class UnknownStepProgress(_StepProgressBase):
    """Progress entry for a step name outside the canonical sequence"""
    kind: Literal["unknown"] = "unknown"
    step: str
    data: Dict[str, Any] = Field(default_factory=dict)


StepProgress = Annotated[Union[KnownStepProgress, UnknownStepProgress], Field(discriminator="kind")]


def parse_step_progress(name: str, raw: Any) -> StepProgress:
    """Build the matching variant for a single progress entry"""
    entry = raw if isinstance(raw, Mapping) else {}
    status = entry.get("status")
    message = entry.get("message")
    try:
        step = StepName(name)
    except ValueError:
        extra = {k: v for k, v in entry.items() if k not in ("status", "message")}
        return UnknownStepProgress(step=name, status=status, message=message, data=extra)
    return KnownStepProgress(step=step, status=status, message=message)


class ProjectProgress(BaseModel):
    steps: List[StepProgress] = Field(default_factory=list)

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "ProjectProgress":
        if not isinstance(raw, Mapping):
            return cls()
        return cls(steps=[parse_step_progress(str(name), value) for name, value in raw.items()])

    def get(self, step: StepName) -> Optional[KnownStepProgress]:
        for entry in self.steps:
            if isinstance(entry, KnownStepProgress) and entry.step == step:
                return entry
        return None

    def status_of(self, step: StepName) -> StepStatus:
        entry = self.get(step)
        return entry.status if entry else StepStatus.PENDING

    def timeline(self) -> List[KnownStepProgress]:
        """Every canonical step in order, pending where nothing was reported"""
        return [self.get(step) or KnownStepProgress(step=step) for step in STEP_SEQUENCE]

    @property
    def unknown_steps(self) -> List[UnknownStepProgress]:
        return [entry for entry in self.steps if isinstance(entry, UnknownStepProgress)]

    @property
    def percentage(self) -> int:
        return progress_percentage(self)

    def to_mapping(self) -> Dict[str, Dict[str, Any]]:
        mapping: Dict[str, Dict[str, Any]] = {}
        for entry in self.steps:
            name = entry.step.value if isinstance(entry, KnownStepProgress) else entry.step
            mapping[name] = {"status": entry.status.value, "message": entry.message}
        return mapping


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def progress_percentage(progress: Optional[ProjectProgress]) -> int:
    """Completed canonical steps over the full sequence, as a rounded percentage"""
    if progress is None:
        return 0
    completed = set()
    for entry in progress.steps:
        if isinstance(entry, KnownStepProgress):
            if entry.status == StepStatus.COMPLETED:
                completed.add(entry.step)
        elif isinstance(entry, UnknownStepProgress):
            continue
        else:
            raise TypeError(f"Unsupported progress entry: {entry!r}")
    return _round_half_up(len(completed) / len(STEP_SEQUENCE) * 100)


def progress_from_steps(steps: Iterable[Any]) -> ProjectProgress:
    """Build progress from ProcessingStep records (anything with step_name/status/error_message)"""
    return ProjectProgress(steps=[
        parse_step_progress(step.step_name, {"status": step.status, "message": step.error_message})
        for step in steps
    ])
