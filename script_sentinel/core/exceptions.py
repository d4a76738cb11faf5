"""
Script Sentinel Custom Exceptions

Custom exception classes and the error-kind classification used throughout
the Script Sentinel system. Provider failures are normalized into these types
at the Gemini client boundary; everything past that boundary branches on
``ErrorKind`` only.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .constants import RATE_LIMIT_DOCS_URL, USAGE_DASHBOARD_URL


class ErrorKind(str, Enum):
    """Normalized failure categories."""
    RATE_LIMIT = "rate_limit"
    UNAVAILABLE = "unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class SentinelError(Exception):
    """Base exception for all Script Sentinel errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(SentinelError):
    """Raised when there's an issue with configuration."""
    pass


class MissingConfigError(ConfigurationError):
    """Raised when a required configuration is missing."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value is invalid."""
    pass


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(SentinelError):
    """Raised for bad local input. Never reaches the network."""
    kind = ErrorKind.VALIDATION


# =============================================================================
# PROVIDER ERRORS
# =============================================================================

class ProviderError(SentinelError):
    """A failure reported by the generative-AI provider."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        status_code: Optional[int] = None,
        details: dict = None,
    ):
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details)
        self.kind = kind
        self.status_code = status_code


class RateLimitError(ProviderError):
    """Quota or rate limit exhausted (HTTP 429 / RESOURCE_EXHAUSTED)."""

    def __init__(self, message: str, status_code: Optional[int] = 429, details: dict = None):
        super().__init__(message, ErrorKind.RATE_LIMIT, status_code, details)


class ServiceUnavailableError(ProviderError):
    """Transient capacity failure (HTTP 503 / UNAVAILABLE / overloaded)."""

    def __init__(self, message: str, status_code: Optional[int] = 503, details: dict = None):
        super().__init__(message, ErrorKind.UNAVAILABLE, status_code, details)


class ProviderTimeoutError(ProviderError):
    """The provider or a transfer did not answer in time."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorKind.TIMEOUT, None, details)


class AuthenticationError(ProviderError):
    """The API key was rejected or refers to a missing entity."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: dict = None):
        super().__init__(message, ErrorKind.AUTHENTICATION, status_code, details)


class MalformedResponseError(SentinelError):
    """Raised when a model response does not match the expected structure."""
    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, target: str, reason: str, raw_text: str = None):
        message = f"Malformed {target} response: {reason}"
        details = {"target": target}
        if raw_text:
            details["raw_preview"] = raw_text[:200]
        super().__init__(message, details)
        self.target = target


class EmptyResultError(ProviderError):
    """The provider answered successfully but returned no usable payload."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorKind.UNKNOWN, None, details)


# =============================================================================
# PIPELINE ERRORS
# =============================================================================

class PipelineError(SentinelError):
    """Base exception for pipeline errors."""
    pass


class PipelineStageError(PipelineError):
    """Raised when a specific pipeline stage fails."""

    def __init__(self, stage_name: str, reason: str):
        message = f"Pipeline stage '{stage_name}' failed: {reason}"
        super().__init__(message, {"stage": stage_name, "reason": reason})


# =============================================================================
# VIDEO ERRORS
# =============================================================================

class VideoGenerationError(SentinelError):
    """Base exception for video generation failures."""
    pass


class VideoTimeoutError(VideoGenerationError):
    """Raised when a video operation does not finish within its time budget."""
    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_seconds: float, operation_name: str = None):
        message = f"Video generation did not finish within {timeout_seconds:.0f}s"
        details = {"timeout_seconds": timeout_seconds}
        if operation_name:
            details["operation"] = operation_name
        super().__init__(message, details)


class VideoCancelledError(VideoGenerationError):
    """Raised when a caller cancels a video generation while it is polling."""
    kind = ErrorKind.CANCELLED

    def __init__(self, operation_name: str = None):
        details = {"operation": operation_name} if operation_name else None
        super().__init__("Video generation was cancelled.", details)


# =============================================================================
# PROJECT ERRORS
# =============================================================================

class ProjectError(SentinelError):
    """Base exception for project-related errors."""
    pass


class ProjectNotFoundError(ProjectError):
    """Raised when a project is not found."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, project_id: str):
        message = f"Project not found: '{project_id}'"
        super().__init__(message, {"project_id": project_id})


class ProjectImportError(ProjectError):
    """Raised when an imported project file is malformed."""
    kind = ErrorKind.VALIDATION

    def __init__(self, reason: str = None):
        details = {"reason": reason} if reason else None
        super().__init__("Invalid project file format.", details)


# =============================================================================
# CLASSIFICATION
# =============================================================================

RATE_LIMIT_MESSAGE = (
    "API quota exceeded. Please check your plan and billing details. "
    f"For more information, see {RATE_LIMIT_DOCS_URL}. "
    f"To monitor your usage, visit {USAGE_DASHBOARD_URL}."
)
UNAVAILABLE_MESSAGE = (
    "The AI model is currently experiencing high demand. "
    "Please wait a few moments and try again."
)
API_KEY_MESSAGE = (
    "API key error. The selected key may be invalid or disabled. "
    "Please select a different key and try again."
)

_RATE_LIMIT_MARKERS = ("429", "RESOURCE_EXHAUSTED")
_UNAVAILABLE_MARKERS = ("503", "UNAVAILABLE", "overloaded")
_NOT_FOUND_MARKER = "Requested entity was not found"


def classify_status(status_code: Optional[int], status: Optional[str] = None, message: str = "") -> ErrorKind:
    """Map a provider status code, status name and message onto an ErrorKind."""
    status = (status or "").upper()
    if status_code == 429 or status == "RESOURCE_EXHAUSTED":
        return ErrorKind.RATE_LIMIT
    if status_code == 503 or status == "UNAVAILABLE":
        return ErrorKind.UNAVAILABLE
    if status_code in (401, 403) or status in ("UNAUTHENTICATED", "PERMISSION_DENIED"):
        return ErrorKind.AUTHENTICATION
    # Fall back to message markers for errors without a structured status.
    if any(marker in message for marker in _RATE_LIMIT_MARKERS):
        return ErrorKind.RATE_LIMIT
    if any(marker in message for marker in _UNAVAILABLE_MARKERS):
        return ErrorKind.UNAVAILABLE
    if _NOT_FOUND_MARKER in message:
        return ErrorKind.AUTHENTICATION
    return ErrorKind.UNKNOWN


def classify_error(error: BaseException) -> ErrorKind:
    """Return the ErrorKind for any exception."""
    if isinstance(error, SentinelError):
        return error.kind
    return classify_status(None, None, str(error))


def is_rate_limit_error(error: BaseException) -> bool:
    """The single branch point deciding whether a batch aborts."""
    return classify_error(error) == ErrorKind.RATE_LIMIT


def user_message(error: BaseException) -> str:
    """Human-readable message shown once per fatal failure."""
    kind = classify_error(error)
    if kind == ErrorKind.RATE_LIMIT:
        return RATE_LIMIT_MESSAGE
    if kind == ErrorKind.UNAVAILABLE:
        return UNAVAILABLE_MESSAGE
    if isinstance(error, SentinelError):
        return error.message
    return str(error) or "An unknown error occurred."


# =============================================================================
# MESSAGE LINKS
# =============================================================================

@dataclass
class MessageLink:
    """A URL found in an error message, with a display label."""
    url: str
    label: str


_URL_PATTERN = re.compile(r"https?://[^\s]+")

LINK_LABELS = [
    ("rate-limits", "About Rate Limits"),
    ("usage", "Monitor Usage"),
    ("billing", "Billing Information"),
]


def extract_message_links(message: str) -> List[MessageLink]:
    """Find URLs in a message and label the recognized ones."""
    links = []
    for match in _URL_PATTERN.finditer(message or ""):
        url = match.group(0).rstrip(".,)")
        label = url
        for marker, text in LINK_LABELS:
            if marker in url:
                label = text
                break
        links.append(MessageLink(url=url, label=label))
    return links
