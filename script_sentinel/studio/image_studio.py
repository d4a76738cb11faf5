"""
Image Studio

Generate, edit and analyze single images. Text-only generations form a
continuation chain: with ``continue_scene`` set, the previous result is
analyzed for its costume and environment log, and the next image must
re-create them. Reference-image generations, edits and analyses break the chain.
"""

from dataclasses import dataclass
from typing import Optional

from script_sentinel.core.constants import ImageStudioMode
from script_sentinel.core.exceptions import ValidationError
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.studio import ImageInput, ImageStudioConfig
from script_sentinel.prompts import visual_prompts

logger = get_logger("studio.image_studio")


@dataclass
class StudioResult:
    mode: ImageStudioMode
    image_base64: Optional[str] = None
    analysis_text: Optional[str] = None
    continued: bool = False


class ImageStudio:
    """Stateful image workspace for one user session."""

    def __init__(self, client, config: ImageStudioConfig = None):
        self.client = client
        self.config = config or ImageStudioConfig()
        self._continuation_source: Optional[str] = None

    @property
    def can_continue(self) -> bool:
        return self._continuation_source is not None

    def reset_continuation(self) -> None:
        self._continuation_source = None

    async def run(
        self,
        prompt: str,
        source_image: ImageInput = None,
        character_reference: ImageInput = None,
        location_reference: ImageInput = None,
        continue_scene: bool = False,
    ) -> StudioResult:
        """Dispatch on the configured mode."""
        mode = self.config.mode
        if mode == ImageStudioMode.GENERATE:
            return await self.generate(prompt, character_reference, location_reference, continue_scene)
        if source_image is None:
            raise ValidationError("Please upload an image first for Edit or Analyze mode.")
        if mode == ImageStudioMode.EDIT:
            return await self.edit(source_image, prompt)
        return await self.analyze(source_image, prompt)

    async def generate(
        self,
        prompt: str,
        character_reference: ImageInput = None,
        location_reference: ImageInput = None,
        continue_scene: bool = False,
    ) -> StudioResult:
        self.require_prompt(prompt)

        if character_reference or location_reference:
            references = [ref for ref in (character_reference, location_reference) if ref]
            composed = visual_prompts.reference_composition_prompt(
                prompt, character_reference is not None, location_reference is not None
            )
            image = await self.client.compose_image(composed, references)
            self.reset_continuation()
            return StudioResult(ImageStudioMode.GENERATE, image_base64=image)

        continued = continue_scene and self.can_continue
        if continued:
            continuity_log = await self.client.analyze_image(
                ImageInput(base64=self._continuation_source, mime_type="image/jpeg"),
                visual_prompts.CONTINUITY_ANALYSIS_PROMPT,
            )
            final_prompt = visual_prompts.studio_continuation_prompt(prompt, continuity_log, self.config)
        else:
            final_prompt = visual_prompts.studio_generate_prompt(prompt, self.config)

        try:
            image = await self.client.generate_image(final_prompt, aspect_ratio=self.config.aspect_ratio)
        except Exception:
            self.reset_continuation()
            raise
        self._continuation_source = image
        logger.info(f"Studio image generated (continued={continued})")
        return StudioResult(ImageStudioMode.GENERATE, image_base64=image, continued=continued)

    async def edit(self, image: ImageInput, prompt: str) -> StudioResult:
        self.require_prompt(prompt)
        self.reset_continuation()
        edited = await self.client.edit_image(image, prompt)
        return StudioResult(ImageStudioMode.EDIT, image_base64=edited)

    async def analyze(self, image: ImageInput, prompt: str) -> StudioResult:
        self.require_prompt(prompt)
        self.reset_continuation()
        text = await self.client.analyze_image(image, prompt)
        return StudioResult(ImageStudioMode.ANALYZE, analysis_text=text)

    @staticmethod
    def require_prompt(prompt: str) -> None:
        if not prompt or not prompt.strip():
            raise ValidationError("Please enter a prompt.")
