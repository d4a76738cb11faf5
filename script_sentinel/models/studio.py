"""
Studio Tool Models

Inputs shared by the image studio, storyboard and video tools.
"""

import base64
import binascii
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from script_sentinel.core.constants import ASPECT_RATIOS, ImageStudioMode, UNSPECIFIED, VideoResolution


class ImageInput(BaseModel):
    """An inline image: base64 payload plus its MIME type."""
    base64: str
    mime_type: str = "image/jpeg"

    @field_validator("base64")
    @classmethod
    def _must_decode(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("image data is not valid base64")
        return value

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.base64)


class ShotStudioConfig(BaseModel):
    """Optional direction applied to a shot blueprint request."""
    genre: str = ""
    location: str = ""
    character_race: str = UNSPECIFIED
    skin_tone: str = UNSPECIFIED
    artistic_style: str = ""


class ImageStudioConfig(BaseModel):
    mode: ImageStudioMode = ImageStudioMode.GENERATE
    genre: str = ""
    artistic_style: str = "Cinematic Realism"
    shot_type: str = ""
    location: str = ""
    character_race: str = UNSPECIFIED
    skin_tone: str = UNSPECIFIED
    aspect_ratio: str = "16:9"

    @field_validator("aspect_ratio")
    @classmethod
    def _known_aspect_ratio(cls, value: str) -> str:
        if value not in ASPECT_RATIOS:
            raise ValueError(f"aspect ratio must be one of {', '.join(ASPECT_RATIOS)}")
        return value


class VideoRequest(BaseModel):
    prompt: str
    resolution: VideoResolution = VideoResolution.HD
    first_frame: Optional[ImageInput] = None
    last_frame: Optional[ImageInput] = None


class VideoResult(BaseModel):
    path: str
    uri: str
    mime_type: str = "video/mp4"
    elapsed_seconds: float = Field(default=0.0, ge=0)
