"""
Client-side form validation. Failures are reported per field and the
request is never sent.
"""
from typing import Dict

from .errors import FormValidationError
from .models import RegistrationForm, VideoProjectForm

MIN_PASSWORD_LENGTH = 6


def validate_project_form(form: VideoProjectForm) -> Dict[str, str]:
    """Return field -> message for every invalid field of a project creation form"""
    errors: Dict[str, str] = {}

    if not form.user_context.strip():
        errors["user_context"] = "Video context is required"

    if form.video_file is None:
        errors["video_file"] = "Video file is required"
    elif not form.video_file.content_type.startswith("video/"):
        errors["video_file"] = "Please select a valid video file"

    if form.music_file is not None and not form.music_file.content_type.startswith("audio/"):
        errors["music_file"] = "Please select a valid audio file"

    if form.min_words >= form.max_words:
        errors["max_words"] = "Max words must be greater than min words"

    return errors


def validate_registration(form: RegistrationForm) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not form.email.strip():
        errors["email"] = "Email is required"
    if form.password != form.confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    if len(form.password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"

    return errors


def ensure_valid_project_form(form: VideoProjectForm) -> None:
    errors = validate_project_form(form)
    if errors:
        raise FormValidationError(errors)


def ensure_valid_registration(form: RegistrationForm) -> None:
    errors = validate_registration(form)
    if errors:
        raise FormValidationError(errors)
