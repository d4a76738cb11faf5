"""
Shot Blueprint Generator

One structured call establishes the scene's continuity anchors (setting,
lighting, character costumes) and its shot list. Then one image request per
shot is issued concurrently, each embedding the same anchors. A failed shot
keeps an empty image; a rate-limit failure cancels the shots still in flight
and propagates.
"""

import asyncio
from typing import List, Optional

from script_sentinel.core.config import SentinelConfig, get_config
from script_sentinel.core.constants import SHOT_ASPECT_RATIO
from script_sentinel.core.exceptions import ValidationError, is_rate_limit_error
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.shots import ShotBlueprint, ShotContext, ShotIdea, ShotList
from script_sentinel.models.studio import ShotStudioConfig
from script_sentinel.prompts import visual_prompts

logger = get_logger("pipelines.shot_blueprint")


def validate_scene_text(scene_text: str) -> str:
    """Reject an empty scene before any request is made."""
    if not scene_text or not scene_text.strip():
        raise ValidationError("Scene text cannot be empty.")
    return scene_text


def validate_shots(shots: List[ShotIdea]) -> List[ShotIdea]:
    if not shots:
        raise ValidationError("No shots to build a storyboard from.")
    return shots


class ShotBlueprintGenerator:
    """Shot list plus per-shot images for a single scene."""

    def __init__(self, client, config: SentinelConfig = None):
        self.client = client
        self.config = config or get_config()

    async def generate(self, scene_text: str, studio_config: ShotStudioConfig = None) -> ShotBlueprint:
        """
        Build the shot list for ``scene_text`` and render every shot.

        Raises:
            ValidationError: if the scene text is empty
            MalformedResponseError: if the shot list does not match its schema
            RateLimitError: if any request is rate limited
        """
        validate_scene_text(scene_text)

        request = visual_prompts.build_shot_list_request(scene_text, studio_config)
        shot_list: ShotList = await self.client.generate_structured(
            request.prompt,
            request.schema,
            ShotList,
            system_instruction=request.system_instruction,
            temperature=self.config.models.shot_list_temperature,
        )
        context = shot_list.context
        logger.info(
            f"Shot list ready: {len(shot_list.shots)} shot(s), "
            f"{len(context.character_designs)} character design(s)"
        )

        images = await self.render_shots(shot_list.shots, scene_text, context)
        return ShotBlueprint(shots=attach_images(shot_list.shots, images), context=context)

    async def storyboard_from_shots(
        self,
        shots: List[ShotIdea],
        scene_text: str,
        context: ShotContext,
    ) -> List[str]:
        """Re-render panels for existing shots with their original anchors."""
        validate_shots(shots)
        return await self.render_shots(shots, scene_text, context)

    async def render_shots(
        self,
        shots: List[ShotIdea],
        scene_text: str,
        context: ShotContext,
    ) -> List[str]:
        """One concurrent image request per shot, in shot order."""
        tasks = [
            asyncio.create_task(self._render_shot(shot, scene_text, context))
            for shot in shots
        ]
        try:
            images = await asyncio.gather(*tasks)
        except Exception:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error(f"Shot rendering aborted; cancelled {len(pending)} pending request(s)")
            raise

        rendered = sum(1 for image in images if image)
        logger.info(f"Rendered {rendered}/{len(shots)} shot image(s)")
        return list(images)

    async def _render_shot(self, shot: ShotIdea, scene_text: str, context: ShotContext) -> str:
        prompt = visual_prompts.shot_image_prompt(
            shot, scene_text, context.scene_overview, context.character_designs
        )
        try:
            images = await self.client.generate_images(
                prompt, number_of_images=1, aspect_ratio=SHOT_ASPECT_RATIO
            )
        except Exception as e:
            if is_rate_limit_error(e):
                raise
            logger.warning(f"Failed to generate image for shot {shot.shot_number}: {e}")
            return ""
        return images[0] if images else ""


def attach_images(shots: List[ShotIdea], images: List[Optional[str]]) -> List[ShotIdea]:
    """Pair shots with freshly rendered images, keeping order."""
    return [
        shot.model_copy(update={"image_base64": image or ""})
        for shot, image in zip(shots, images)
    ]
