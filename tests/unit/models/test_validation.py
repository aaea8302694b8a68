"""Unit tests for client-side form validation."""
import pytest

from video_dashboard.errors import ErrorCode, FormValidationError
from video_dashboard.models import UploadFile, VideoProjectForm, RegistrationForm
from video_dashboard.validation import (ensure_valid_project_form, validate_project_form,
                                        validate_registration)

pytestmark = pytest.mark.unit

VIDEO = UploadFile(filename="clip.mp4", content=b"v", content_type="video/mp4")


class TestProjectForm:
    def test_defaults(self):
        form = VideoProjectForm()
        assert (form.voice, form.script_style, form.animation_style, form.caption_position) == (
            "nova", "narrative", "dynamic", "center")
        assert (form.min_words, form.max_words) == (2, 4)

    def test_valid_form_has_no_errors(self):
        assert validate_project_form(VideoProjectForm(user_context="Demo", video_file=VIDEO)) == {}

    def test_required_fields(self):
        errors = validate_project_form(VideoProjectForm(user_context="   "))
        assert set(errors) == {"user_context", "video_file"}

    def test_word_range_must_increase(self):
        errors = validate_project_form(VideoProjectForm(user_context="Demo", video_file=VIDEO,
                                                        min_words=5, max_words=3))
        assert errors == {"max_words": "Max words must be greater than min words"}

        errors = validate_project_form(VideoProjectForm(user_context="Demo", video_file=VIDEO,
                                                        min_words=4, max_words=4))
        assert "max_words" in errors

    def test_file_types_checked(self):
        form = VideoProjectForm(
            user_context="Demo",
            video_file=UploadFile(filename="notes.txt", content=b"x", content_type="text/plain"),
            music_file=UploadFile(filename="clip.mp4", content=b"x", content_type="video/mp4"),
        )
        assert set(validate_project_form(form)) == {"video_file", "music_file"}

    def test_ensure_raises_with_field_errors(self):
        with pytest.raises(FormValidationError) as exc_info:
            ensure_valid_project_form(VideoProjectForm(user_context="Demo", video_file=VIDEO,
                                                       min_words=5, max_words=3))

        assert exc_info.value.error_code == ErrorCode.INVALID_FORM
        assert not exc_info.value.is_retryable
        assert exc_info.value.to_dict()["details"] == {"fields": exc_info.value.errors}

    def test_upload_from_path_guesses_type(self, tmp_path):
        path = tmp_path / "song.mp3"
        path.write_bytes(b"ID3")

        upload = UploadFile.from_path(str(path))

        assert upload.filename == "song.mp3"
        assert upload.content == b"ID3"
        assert upload.content_type == "audio/mpeg"


class TestRegistration:
    def test_valid(self):
        form = RegistrationForm(email="jane@example.com", full_name="Jane", password="secret1",
                                confirm_password="secret1")
        assert validate_registration(form) == {}

    def test_passwords_must_match_and_be_long_enough(self):
        form = RegistrationForm(email="jane@example.com", password="abc", confirm_password="abcd")
        errors = validate_registration(form)
        assert errors["confirm_password"] == "Passwords do not match"
        assert errors["password"] == "Password must be at least 6 characters long"

    def test_email_required(self):
        form = RegistrationForm(password="secret1", confirm_password="secret1")
        assert set(validate_registration(form)) == {"email"}
