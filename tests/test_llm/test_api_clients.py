"""
Tests for the Gemini Client Adapter

Tests for script_sentinel/llm/api_clients.py
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google.genai import errors as genai_errors

from script_sentinel.core.exceptions import (
    AuthenticationError,
    EmptyResultError,
    ErrorKind,
    MalformedResponseError,
    MissingConfigError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    ServiceUnavailableError,
)
from script_sentinel.llm.api_clients import (
    GeminiClient,
    normalize_provider_error,
    parse_structured,
    strip_json_fences,
)
from script_sentinel.models.analysis import Stage1Result, Stage3Result
from script_sentinel.models.studio import VideoRequest


def api_error(code, status, message):
    return genai_errors.APIError(code, {"error": {"code": code, "status": status, "message": message}})


@pytest.fixture
def genai_client():
    """A mocked google-genai client exposing the aio surface."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_images = AsyncMock()
    client.aio.models.generate_videos = AsyncMock()
    client.aio.operations.get = AsyncMock()
    return client


@pytest.fixture
def gemini(genai_client, sentinel_config):
    return GeminiClient(api_key="test-key", config=sentinel_config, client=genai_client)


class TestNormalizeProviderError:
    """Tests for provider error normalization."""

    def test_resource_exhausted(self):
        error = normalize_provider_error(api_error(429, "RESOURCE_EXHAUSTED", "Quota exceeded"))

        assert isinstance(error, RateLimitError)
        assert error.kind == ErrorKind.RATE_LIMIT

    def test_unavailable(self):
        error = normalize_provider_error(api_error(503, "UNAVAILABLE", "The model is overloaded."))

        assert isinstance(error, ServiceUnavailableError)

    def test_entity_not_found_is_key_problem(self):
        error = normalize_provider_error(api_error(404, "NOT_FOUND", "Requested entity was not found."))

        assert isinstance(error, AuthenticationError)
        assert "API key error" in error.message

    def test_http_status_error(self):
        request = httpx.Request("GET", "https://example.com/video")
        response = httpx.Response(429, request=request)
        error = httpx.HTTPStatusError("Too Many Requests", request=request, response=response)

        assert isinstance(normalize_provider_error(error), RateLimitError)

    def test_timeout(self):
        error = normalize_provider_error(httpx.ReadTimeout("slow"), "download_video")

        assert isinstance(error, ProviderTimeoutError)
        assert error.kind == ErrorKind.TIMEOUT

    def test_other_error(self):
        error = normalize_provider_error(ValueError("bad arg"))

        assert type(error) is ProviderError
        assert error.kind == ErrorKind.UNKNOWN


class TestParseStructured:
    """Tests for structured response parsing."""

    def test_fenced_json(self, stage1_payload):
        text = "```json\n" + json.dumps(stage1_payload) + "\n```"

        result = parse_structured(text, Stage1Result)

        assert result.page_count == 2

    def test_strip_plain_fence(self):
        assert strip_json_fences("```\n{}\n```") == "{}"

    @pytest.mark.parametrize("text", ["", "   ", "{not json", '{"page_count": 1}'])
    def test_malformed(self, text):
        with pytest.raises(MalformedResponseError):
            parse_structured(text, Stage1Result)

    def test_unknown_department_is_malformed(self, stage3_payload):
        """Departments outside the fixed set break the response contract."""
        stage3_payload["props_and_set_dressing"][0]["department"] = "Catering"

        with pytest.raises(MalformedResponseError) as exc_info:
            parse_structured(json.dumps(stage3_payload), Stage3Result)

        assert exc_info.value.kind == ErrorKind.MALFORMED_RESPONSE

    def test_known_department_parses(self, stage3_payload):
        result = parse_structured(json.dumps(stage3_payload), Stage3Result)

        assert result.props_and_set_dressing[0].department.value == "Props"


class TestGeminiClient:
    """Tests for the client against a mocked SDK."""

    def test_missing_key(self, sentinel_config, monkeypatch):
        monkeypatch.setattr("script_sentinel.llm.api_clients.get_gemini_api_key", lambda: None)

        with pytest.raises(MissingConfigError):
            GeminiClient(config=sentinel_config)

    @pytest.mark.asyncio
    async def test_generate_structured(self, gemini, genai_client, stage1_payload):
        import json
        genai_client.aio.models.generate_content.return_value = SimpleNamespace(text=json.dumps(stage1_payload))

        result = await gemini.generate_structured("prompt", {"type": "OBJECT"}, Stage1Result, temperature=0.3)

        assert result.logline.startswith("A lighthouse keeper")
        kwargs = genai_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].temperature == 0.3

    @pytest.mark.asyncio
    async def test_rate_limit_surfaces_typed(self, gemini, genai_client):
        genai_client.aio.models.generate_content.side_effect = api_error(429, "RESOURCE_EXHAUSTED", "quota")

        with pytest.raises(RateLimitError):
            await gemini.generate_text("hello")

    @pytest.mark.asyncio
    async def test_generate_images_base64(self, gemini, genai_client):
        generated = [SimpleNamespace(image=SimpleNamespace(image_bytes=b"abc")),
                     SimpleNamespace(image=None)]
        genai_client.aio.models.generate_images.return_value = SimpleNamespace(generated_images=generated)

        images = await gemini.generate_images("a lighthouse", number_of_images=2, aspect_ratio="3:4")

        assert images == ["YWJj"]
        config = genai_client.aio.models.generate_images.call_args.kwargs["config"]
        assert config.aspect_ratio == "3:4"
        assert config.number_of_images == 2

    @pytest.mark.asyncio
    async def test_generate_image_empty(self, gemini, genai_client):
        genai_client.aio.models.generate_images.return_value = SimpleNamespace(generated_images=[])

        with pytest.raises(EmptyResultError, match="Image generation failed to return an image."):
            await gemini.generate_image("nothing")

    @pytest.mark.asyncio
    async def test_start_video_wraps_operation(self, gemini, genai_client):
        video = SimpleNamespace(uri="https://example.com/v.mp4")
        genai_client.aio.models.generate_videos.return_value = SimpleNamespace(
            name="operations/1", done=True, error=None,
            response=SimpleNamespace(generated_videos=[SimpleNamespace(video=video)]),
        )

        operation = await gemini.start_video(VideoRequest(prompt="waves"))

        assert operation.done
        assert operation.video_uri == "https://example.com/v.mp4"
        config = genai_client.aio.models.generate_videos.call_args.kwargs["config"]
        assert config.resolution == "720p"
