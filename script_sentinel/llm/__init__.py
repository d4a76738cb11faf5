"""Gemini boundary adapter."""

from .api_clients import (
    GeminiClient,
    VideoOperation,
    normalize_provider_error,
    parse_structured,
    provider_errors,
    strip_json_fences,
)

__all__ = [
    "GeminiClient",
    "VideoOperation",
    "normalize_provider_error",
    "parse_structured",
    "provider_errors",
    "strip_json_fences",
]
