"""
Error codes and exceptions raised by the dashboard client core
"""
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .logging_config import configure_logging

logger = configure_logging("video-dashboard:errors")


class ErrorCode(Enum):
    """Standardized error codes"""

    # Retryable errors
    NETWORK_FAILURE = "RETRY_1001"
    NETWORK_TIMEOUT = "RETRY_1002"
    RATE_LIMITED = "RETRY_1003"
    SERVER_ERROR = "RETRY_1004"

    # Fatal errors
    UNAUTHORIZED = "FATAL_2001"
    FORBIDDEN = "FATAL_2002"
    NOT_FOUND = "FATAL_2003"
    INVALID_RESPONSE = "FATAL_2004"
    CLIENT_ERROR = "FATAL_2005"
    AUTHENTICATION_FAILED = "FATAL_2006"

    # Client-side validation errors
    INVALID_FORM = "VALIDATION_3001"

    @property
    def is_retryable(self) -> bool:
        """Check if error is retryable"""
        return self.value.startswith("RETRY_")

    @property
    def is_fatal(self) -> bool:
        """Check if error is fatal"""
        return self.value.startswith("FATAL_")

    @classmethod
    def from_status(cls, status: int) -> "ErrorCode":
        """Map an HTTP status code to an error code"""
        if status == 401:
            return cls.UNAUTHORIZED
        if status == 403:
            return cls.FORBIDDEN
        if status == 404:
            return cls.NOT_FOUND
        if status == 429:
            return cls.RATE_LIMITED
        if status >= 500:
            return cls.SERVER_ERROR
        return cls.CLIENT_ERROR


class DashboardClientError(Exception):
    """Base exception with error code"""

    def __init__(self, error_code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return self.error_code.is_retryable

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "retryable": self.error_code.is_retryable,
        }


class ApiError(DashboardClientError):
    """Raised when the backend answers with a non-success status or an unreadable body."""

    def __init__(self, message: str, status: int, status_text: str, error_code: Optional[ErrorCode] = None):
        self.status = status
        self.status_text = status_text
        super().__init__(
            error_code or ErrorCode.from_status(status),
            message,
            {"status": status, "status_text": status_text},
        )

    @property
    def is_unauthorized(self) -> bool:
        return self.status == 401

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, message={self.message!r})"


class NetworkError(DashboardClientError):
    """Raised when the request never produced an HTTP response."""

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(ErrorCode.NETWORK_TIMEOUT if timeout else ErrorCode.NETWORK_FAILURE, message)


class FormValidationError(DashboardClientError):
    """Raised before submission when form fields are invalid."""

    def __init__(self, errors: Mapping[str, str]):
        self.errors = dict(errors)
        super().__init__(ErrorCode.INVALID_FORM, "Form validation failed", {"fields": self.errors})


class AuthenticationError(DashboardClientError):
    """Raised when login or registration is rejected."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(ErrorCode.AUTHENTICATION_FAILED, message, {"status": status})


def describe_error(error: BaseException) -> str:
    """Return a message fit for display and log the failure"""
    if isinstance(error, ApiError):
        logger.error("API error", status=error.status, message=error.message)
        return error.message
    if isinstance(error, DashboardClientError):
        logger.error("Client error", error_code=error.error_code.value, message=error.message)
        return error.message
    logger.error("Unknown error", error=repr(error))
    return "An unexpected error occurred"
