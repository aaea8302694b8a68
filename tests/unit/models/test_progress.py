"""Unit tests for project progress parsing and percentage."""
import pytest

from video_dashboard.models import ProcessingStep, ProjectStatus
from video_dashboard.progress import (STEP_SEQUENCE, KnownStepProgress, ProjectProgress, StepName, StepStatus,
                                      UnknownStepProgress, progress_from_steps, progress_percentage)

pytestmark = pytest.mark.unit


class TestProgressPercentage:
    def test_two_of_six_completed_is_33(self):
        progress = ProjectProgress.from_mapping({
            "video_analysis": {"status": "completed"},
            "script_generation": {"status": "completed"},
            "audio_generation": {"status": "processing"},
        })
        assert progress_percentage(progress) == 33

    @pytest.mark.parametrize("completed,expected", [(0, 0), (1, 17), (3, 50), (4, 67), (5, 83), (6, 100)])
    def test_rounds_to_nearest(self, completed, expected):
        raw = {step.value: {"status": "completed"} for step in STEP_SEQUENCE[:completed]}
        assert ProjectProgress.from_mapping(raw).percentage == expected

    def test_missing_progress_is_zero(self):
        assert progress_percentage(None) == 0
        assert ProjectProgress.from_mapping(None).percentage == 0

    def test_unknown_steps_do_not_count(self):
        progress = ProjectProgress.from_mapping({
            "video_analysis": {"status": "completed"},
            "thumbnail_generation": {"status": "completed", "extra": 1},
        })

        assert progress.percentage == 17
        unknown = progress.unknown_steps
        assert len(unknown) == 1
        assert isinstance(unknown[0], UnknownStepProgress)
        assert unknown[0].data == {"extra": 1}


class TestProjectProgress:
    def test_unrecognized_status_reads_as_pending(self):
        progress = ProjectProgress.from_mapping({"audio_sync": {"status": "weird"}})
        assert progress.status_of(StepName.AUDIO_SYNC) == StepStatus.PENDING

    def test_timeline_covers_every_step_in_order(self):
        progress = ProjectProgress.from_mapping({"caption_rendering": {"status": "failed", "message": "font"}})

        timeline = progress.timeline()

        assert [entry.step for entry in timeline] == STEP_SEQUENCE
        assert timeline[-1].status == StepStatus.FAILED
        assert timeline[-1].message == "font"
        assert all(isinstance(entry, KnownStepProgress) for entry in timeline)

    def test_step_labels(self):
        assert StepName.VIDEO_ANALYSIS.label == "Video Analysis"
        assert StepName.CAPTION_RENDERING.description == "Adding captions to video"

    def test_to_mapping_round_trip(self):
        raw = {"video_analysis": {"status": "completed", "message": None}}
        assert ProjectProgress.from_mapping(raw).to_mapping() == raw

    def test_from_processing_steps(self):
        steps = [
            ProcessingStep(id="s1", video_project_id="p1", step_name="video_analysis", status="completed"),
            ProcessingStep(id="s2", video_project_id="p1", step_name="script_generation", status="failed",
                           error_message="LLM timeout"),
        ]

        progress = progress_from_steps(steps)

        assert progress.percentage == 17
        assert progress.get(StepName.SCRIPT_GENERATION).message == "LLM timeout"


class TestProjectStatus:
    def test_unknown_status_falls_back_to_draft(self):
        assert ProjectStatus.parse("exploded") == ProjectStatus.DRAFT

    def test_colors(self):
        assert ProjectStatus.FAILED.color == "red"
        assert ProjectStatus.READY.label == "Ready"
