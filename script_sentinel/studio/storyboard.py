"""Storyboard tools: four-panel grid from a scene description, or panels from an existing shot list."""

from typing import List

from script_sentinel.core.constants import SHOT_ASPECT_RATIO
from script_sentinel.core.exceptions import EmptyResultError, ValidationError
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.shots import ShotContext, ShotIdea, StoryboardData
from script_sentinel.pipelines.shot_blueprint import ShotBlueprintGenerator, attach_images
from script_sentinel.prompts.visual_prompts import storyboard_grid_prompt

logger = get_logger("studio.storyboard")


def validate_scene_description(scene_description: str) -> str:
    if not scene_description or not scene_description.strip():
        raise ValidationError("Please describe the scene for the storyboard.")
    return scene_description


async def generate_storyboard_grid(client, scene_description: str) -> StoryboardData:
    """One 16:9 image holding a 2x2 storyboard for the scene."""
    validate_scene_description(scene_description)
    images = await client.generate_images(
        storyboard_grid_prompt(scene_description),
        number_of_images=1,
        aspect_ratio=SHOT_ASPECT_RATIO,
    )
    if not images:
        raise EmptyResultError("Storyboard generation failed to return an image.")
    return StoryboardData(scene_description=scene_description, images=images[:1])


async def generate_storyboard_from_shots(
    client,
    shots: List[ShotIdea],
    scene_text: str,
    context: ShotContext,
) -> StoryboardData:
    """
    One panel per shot, rendered with the anchors the shots were created with.
    Failed panels are empty strings; a rate-limit failure propagates.
    """
    generator = ShotBlueprintGenerator(client)
    images = await generator.storyboard_from_shots(shots, scene_text, context)
    logger.info(f"Storyboard from shots: {sum(1 for i in images if i)}/{len(images)} panel(s)")
    return StoryboardData(
        scene_description=scene_text,
        images=images,
        shot_ideas=attach_images(shots, images),
    )
