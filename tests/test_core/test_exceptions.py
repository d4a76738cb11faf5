"""
Tests for Error Classification

Tests for script_sentinel/core/exceptions.py
"""

from script_sentinel.core.constants import RATE_LIMIT_DOCS_URL, USAGE_DASHBOARD_URL
from script_sentinel.core.exceptions import (
    ErrorKind,
    MalformedResponseError,
    ProjectImportError,
    ProviderError,
    RATE_LIMIT_MESSAGE,
    RateLimitError,
    ServiceUnavailableError,
    UNAVAILABLE_MESSAGE,
    ValidationError,
    VideoCancelledError,
    classify_error,
    classify_status,
    extract_message_links,
    is_rate_limit_error,
    user_message,
)


class TestClassifyStatus:
    """Tests for mapping provider statuses onto error kinds."""

    def test_rate_limit_by_code(self):
        assert classify_status(429) == ErrorKind.RATE_LIMIT

    def test_rate_limit_by_status_name(self):
        assert classify_status(None, "resource_exhausted") == ErrorKind.RATE_LIMIT

    def test_unavailable(self):
        assert classify_status(503) == ErrorKind.UNAVAILABLE
        assert classify_status(None, "UNAVAILABLE") == ErrorKind.UNAVAILABLE

    def test_authentication(self):
        assert classify_status(403) == ErrorKind.AUTHENTICATION
        assert classify_status(404, None, "Requested entity was not found.") == ErrorKind.AUTHENTICATION

    def test_message_markers(self):
        assert classify_status(None, None, "got 429 Too Many Requests") == ErrorKind.RATE_LIMIT
        assert classify_status(None, None, "The model is overloaded") == ErrorKind.UNAVAILABLE

    def test_unknown(self):
        assert classify_status(500, "INTERNAL", "boom") == ErrorKind.UNKNOWN


class TestClassifyError:
    """Tests for classify_error and user_message."""

    def test_sentinel_errors_carry_their_kind(self):
        assert classify_error(ValidationError("x")) == ErrorKind.VALIDATION
        assert classify_error(MalformedResponseError("stage1", "bad")) == ErrorKind.MALFORMED_RESPONSE
        assert classify_error(ProjectImportError()) == ErrorKind.VALIDATION
        assert classify_error(VideoCancelledError()) == ErrorKind.CANCELLED

    def test_plain_exception_uses_message(self):
        assert is_rate_limit_error(RuntimeError("RESOURCE_EXHAUSTED: quota"))
        assert not is_rate_limit_error(RuntimeError("socket closed"))

    def test_rate_limit_message_has_both_links(self):
        message = user_message(RateLimitError("429 from provider"))

        assert message == RATE_LIMIT_MESSAGE
        assert RATE_LIMIT_DOCS_URL in message
        assert USAGE_DASHBOARD_URL in message

    def test_unavailable_message(self):
        assert user_message(ServiceUnavailableError("503")) == UNAVAILABLE_MESSAGE

    def test_provider_error_keeps_message(self):
        error = ProviderError("Bad request", ErrorKind.UNKNOWN, 400)

        assert user_message(error) == "Bad request"
        assert error.details["status_code"] == 400

    def test_import_error_message(self):
        assert user_message(ProjectImportError("not JSON")) == "Invalid project file format."


class TestMessageLinks:
    """Tests for link extraction from error messages."""

    def test_rate_limit_links_are_labelled(self):
        links = extract_message_links(RATE_LIMIT_MESSAGE)

        assert [link.url for link in links] == [RATE_LIMIT_DOCS_URL, USAGE_DASHBOARD_URL]
        assert [link.label for link in links] == ["About Rate Limits", "Monitor Usage"]

    def test_unknown_url_labelled_with_itself(self):
        links = extract_message_links("See https://example.com/help).")

        assert links[0].url == "https://example.com/help"
        assert links[0].label == "https://example.com/help"

    def test_no_links(self):
        assert extract_message_links("Nothing here") == []
        assert extract_message_links(None) == []
