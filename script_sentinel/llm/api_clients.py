"""
Script Sentinel API Clients

Async client for the Google Gemini family (text, Imagen, Veo) built on the
google-genai SDK. This module is the boundary adapter: every provider failure
is caught here and re-raised as a typed ``ProviderError`` carrying an
``ErrorKind``, so nothing upstream inspects raw provider messages.
"""

from __future__ import annotations

import base64
import json
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from script_sentinel.core.config import SentinelConfig, get_config
from script_sentinel.core.constants import VIDEO_ASPECT_RATIO
from script_sentinel.core.env_loader import get_gemini_api_key
from script_sentinel.core.exceptions import (
    AuthenticationError,
    EmptyResultError,
    ErrorKind,
    MalformedResponseError,
    MissingConfigError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    SentinelError,
    ServiceUnavailableError,
    API_KEY_MESSAGE,
    classify_status,
)
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.studio import ImageInput, VideoRequest

logger = get_logger("llm.api_clients")

ModelT = TypeVar("ModelT", bound=BaseModel)


# ============================================================================
#  ERROR NORMALIZATION
# ============================================================================

def normalize_provider_error(error: BaseException, operation: str = "request") -> SentinelError:
    """Convert any provider or transport exception into a typed SentinelError."""
    if isinstance(error, SentinelError):
        return error

    status_code: Optional[int] = None
    status: Optional[str] = None
    message = str(error)

    if isinstance(error, genai_errors.APIError):
        status_code = error.code
        status = error.status
        message = error.message or message
    elif isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
    elif isinstance(error, httpx.TimeoutException):
        return ProviderTimeoutError(f"{operation} timed out: {message}", {"operation": operation})

    kind = classify_status(status_code, status, f"{status_code or ''} {status or ''} {message}")
    details = {"operation": operation}
    if status:
        details["status"] = status

    if kind == ErrorKind.RATE_LIMIT:
        return RateLimitError(message, status_code or 429, details)
    if kind == ErrorKind.UNAVAILABLE:
        return ServiceUnavailableError(message, status_code or 503, details)
    if kind == ErrorKind.AUTHENTICATION:
        return AuthenticationError(API_KEY_MESSAGE, status_code, {**details, "provider_message": message})
    return ProviderError(message or f"{operation} failed", kind, status_code, details)


@contextmanager
def provider_errors(operation: str) -> Iterator[None]:
    """Normalize exceptions raised inside the block."""
    try:
        yield
    except SentinelError:
        raise
    except Exception as e:
        normalized = normalize_provider_error(e, operation)
        logger.debug(f"{operation} failed ({normalized.kind.value}): {e}")
        raise normalized from e


# ============================================================================
#  RESPONSE PARSING
# ============================================================================

def strip_json_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = (text or "").strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def parse_structured(text: str, model: Type[ModelT], target: str = None) -> ModelT:
    """
    Validate a JSON response against a pydantic model.

    Raises:
        MalformedResponseError: if the text is not JSON or does not match the model
    """
    target = target or model.__name__
    cleaned = strip_json_fences(text)
    if not cleaned:
        raise MalformedResponseError(target, "empty response")
    try:
        return model.model_validate_json(cleaned)
    except PydanticValidationError as e:
        reason = f"{e.error_count()} validation error(s)"
        try:
            json.loads(cleaned)
        except json.JSONDecodeError as je:
            reason = f"invalid JSON ({je.msg})"
        raise MalformedResponseError(target, reason, cleaned) from e


# ============================================================================
#  RESPONSE TYPES
# ============================================================================

@dataclass
class VideoOperation:
    """Handle for a long-running video generation."""
    name: str
    done: bool
    video_uri: Optional[str] = None
    error: Optional[Dict[str, Any]] = None
    raw: Any = None


# ============================================================================
#  GEMINI CLIENT
# ============================================================================

class GeminiClient:
    """Async client for Gemini text, Imagen image and Veo video endpoints."""

    def __init__(self, api_key: str = None, config: SentinelConfig = None, client: genai.Client = None):
        self.api_key = api_key or get_gemini_api_key()
        if client is None and not self.api_key:
            raise MissingConfigError(
                "Gemini API key not set. Define GEMINI_API_KEY (or GOOGLE_API_KEY) in the environment or .env"
            )
        self.config = config or get_config()
        self._client = client or genai.Client(api_key=self.api_key)

    @property
    def models(self):
        return self._client.aio.models

    # ------------------------------------------------------------------ text

    async def generate_text(
        self,
        prompt: str,
        system_instruction: str = None,
        temperature: float = None,
        model: str = None,
    ) -> str:
        """Generate free text."""
        model = model or self.config.models.text_model
        with provider_errors(f"generate_text[{model}]"):
            response = await self.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    temperature=temperature,
                ),
            )
        return (response.text or "").strip()

    async def generate_json(
        self,
        prompt: str,
        schema: Dict[str, Any],
        system_instruction: str = None,
        temperature: float = None,
        model: str = None,
    ) -> str:
        """Generate JSON text constrained by a response schema."""
        model = model or self.config.models.text_model
        with provider_errors(f"generate_json[{model}]"):
            response = await self.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=system_instruction,
                    response_mime_type="application/json",
                    response_schema=schema,
                    temperature=temperature,
                ),
            )
        return (response.text or "").strip()

    async def generate_structured(
        self,
        prompt: str,
        schema: Dict[str, Any],
        result_model: Type[ModelT],
        system_instruction: str = None,
        temperature: float = None,
        model: str = None,
    ) -> ModelT:
        """Generate JSON and validate it into ``result_model``."""
        text = await self.generate_json(
            prompt,
            schema,
            system_instruction=system_instruction,
            temperature=temperature,
            model=model,
        )
        return parse_structured(text, result_model)

    # ---------------------------------------------------------------- images

    async def generate_images(
        self,
        prompt: str,
        number_of_images: int = 1,
        aspect_ratio: str = "16:9",
        model: str = None,
    ) -> List[str]:
        """Text-to-image with Imagen. Returns base64 strings, possibly fewer than requested."""
        model = model or self.config.models.image_model
        with provider_errors(f"generate_images[{model}]"):
            response = await self.models.generate_images(
                model=model,
                prompt=prompt,
                config=types.GenerateImagesConfig(
                    number_of_images=number_of_images,
                    output_mime_type=self.config.images.output_mime_type,
                    aspect_ratio=aspect_ratio,
                ),
            )
        images = []
        for generated in response.generated_images or []:
            if generated.image and generated.image.image_bytes:
                images.append(base64.b64encode(generated.image.image_bytes).decode("ascii"))
        return images

    async def generate_image(self, prompt: str, aspect_ratio: str = "16:9") -> str:
        """Generate exactly one image or raise EmptyResultError."""
        images = await self.generate_images(prompt, 1, aspect_ratio)
        if not images:
            raise EmptyResultError("Image generation failed to return an image.")
        return images[0]

    async def compose_image(self, prompt: str, references: List[ImageInput]) -> str:
        """Image generation conditioned on inline reference images."""
        return await self._image_from_parts(references, prompt, "compose_image")

    async def edit_image(self, image: ImageInput, prompt: str) -> str:
        return await self._image_from_parts([image], prompt, "edit_image")

    async def analyze_image(self, image: ImageInput, prompt: str = None, model: str = None) -> str:
        """Describe or answer a question about an image."""
        model = model or self.config.models.fast_model
        contents = [
            types.Part.from_bytes(data=image.to_bytes(), mime_type=image.mime_type),
            prompt or "Describe this image in detail.",
        ]
        with provider_errors(f"analyze_image[{model}]"):
            response = await self.models.generate_content(model=model, contents=contents)
        return (response.text or "").strip()

    async def _image_from_parts(self, images: List[ImageInput], prompt: str, operation: str) -> str:
        model = self.config.models.image_edit_model
        contents: List[Any] = [
            types.Part.from_bytes(data=img.to_bytes(), mime_type=img.mime_type) for img in images
        ]
        contents.append(prompt)
        with provider_errors(f"{operation}[{model}]"):
            response = await self.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
            )
        for candidate in response.candidates or []:
            if not candidate.content:
                continue
            for part in candidate.content.parts or []:
                if part.inline_data and part.inline_data.data:
                    return base64.b64encode(part.inline_data.data).decode("ascii")
        raise EmptyResultError("No image was generated in the response.", {"operation": operation})

    # ----------------------------------------------------------------- video

    async def start_video(self, request: VideoRequest) -> VideoOperation:
        """Submit a Veo generation and return its operation handle."""
        model = self.config.models.video_model
        config = types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=request.resolution.value,
            aspect_ratio=VIDEO_ASPECT_RATIO,
        )
        image = None
        if request.first_frame:
            image = types.Image(image_bytes=request.first_frame.to_bytes(), mime_type=request.first_frame.mime_type)
            # A last frame is only meaningful together with a first frame
            if request.last_frame:
                config.last_frame = types.Image(
                    image_bytes=request.last_frame.to_bytes(),
                    mime_type=request.last_frame.mime_type,
                )
        with provider_errors(f"generate_videos[{model}]"):
            operation = await self.models.generate_videos(
                model=model,
                prompt=request.prompt,
                image=image,
                config=config,
            )
        return self._wrap_operation(operation)

    async def poll_video(self, operation: VideoOperation) -> VideoOperation:
        with provider_errors("get_video_operation"):
            refreshed = await self._client.aio.operations.get(operation.raw)
        return self._wrap_operation(refreshed)

    async def download_video(self, uri: str, destination: Path) -> Path:
        """Fetch a finished video, authenticating with the API key."""
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        headers = {"x-goog-api-key": self.api_key} if self.api_key else {}
        with provider_errors("download_video"):
            async with httpx.AsyncClient(timeout=120.0, follow_redirects=True) as http:
                response = await http.get(uri, headers=headers)
                response.raise_for_status()
        destination.write_bytes(response.content)
        logger.info(f"Downloaded video ({len(response.content)} bytes) to {destination}")
        return destination

    @staticmethod
    def _wrap_operation(operation: Any) -> VideoOperation:
        uri = None
        response = getattr(operation, "response", None)
        videos = getattr(response, "generated_videos", None) or []
        if videos and videos[0].video:
            uri = videos[0].video.uri
        return VideoOperation(
            name=getattr(operation, "name", "") or "",
            done=bool(getattr(operation, "done", False)),
            video_uri=uri,
            error=getattr(operation, "error", None),
            raw=operation,
        )
