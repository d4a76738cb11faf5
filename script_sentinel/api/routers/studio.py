"""Studio router: script generator, shot ideas, storyboards, image studio and video."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from script_sentinel.api.dependencies import get_client, get_session, limiter
from script_sentinel.core.constants import ImageStudioMode
from script_sentinel.core.logging_config import get_logger
from script_sentinel.core.project_session import ProjectSession
from script_sentinel.models.shots import ShotContext, ShotIdea
from script_sentinel.models.studio import ImageInput, ImageStudioConfig, ShotStudioConfig, VideoRequest
from script_sentinel.pipelines.shot_blueprint import ShotBlueprintGenerator, validate_scene_text, validate_shots
from script_sentinel.pipelines.video_pipeline import VideoGenerator
from script_sentinel.studio.image_studio import ImageStudio
from script_sentinel.studio.script_writer import generate_script_from_idea, validate_idea
from script_sentinel.studio.storyboard import (
    generate_storyboard_from_shots,
    generate_storyboard_grid,
    validate_scene_description,
)

logger = get_logger("api.studio")

router = APIRouter()

_image_studio: Optional[ImageStudio] = None


def get_image_studio(client=Depends(get_client)) -> ImageStudio:
    """One image studio per process, so the continuation chain survives between requests."""
    global _image_studio
    if _image_studio is None:
        _image_studio = ImageStudio(client)
    return _image_studio


class ScriptIdeaRequest(BaseModel):
    idea: str


class ShotIdeasRequest(BaseModel):
    scene_text: str
    config: ShotStudioConfig = ShotStudioConfig()


class StoryboardRequest(BaseModel):
    scene_description: str


class StoryboardFromShotsRequest(BaseModel):
    scene_text: str
    shots: List[ShotIdea]
    context: ShotContext


class ImageGenerateRequest(BaseModel):
    prompt: str
    config: ImageStudioConfig = ImageStudioConfig()
    character_reference: Optional[ImageInput] = None
    location_reference: Optional[ImageInput] = None
    continue_scene: bool = False


class ImageEditRequest(BaseModel):
    prompt: str
    image: ImageInput


@router.post("/script")
@limiter.limit("10/minute")
async def generate_script(
    request: Request,
    idea_request: ScriptIdeaRequest,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    validate_idea(idea_request.idea)
    session.update(script_generator_idea=idea_request.idea)
    script = await generate_script_from_idea(client, idea_request.idea, session.config)
    return {"script": script}


@router.post("/shots")
@limiter.limit("5/minute")
async def generate_shot_ideas(
    request: Request,
    shots_request: ShotIdeasRequest,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    validate_scene_text(shots_request.scene_text)
    session.update(shot_idea_studio_config=shots_request.config)
    generator = ShotBlueprintGenerator(client, session.config)
    blueprint = await generator.generate(shots_request.scene_text, shots_request.config)
    session.set_shot_ideas(blueprint.shots, blueprint.context)
    return blueprint


@router.post("/storyboard")
@limiter.limit("5/minute")
async def generate_storyboard(
    request: Request,
    storyboard_request: StoryboardRequest,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    validate_scene_description(storyboard_request.scene_description)
    session.update(storyboard_scene_description=storyboard_request.scene_description)
    data = await generate_storyboard_grid(client, storyboard_request.scene_description)
    session.set_storyboard(data)
    return data


@router.post("/storyboard/from-shots")
@limiter.limit("5/minute")
async def storyboard_from_shots(
    request: Request,
    shots_request: StoryboardFromShotsRequest,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    validate_shots(shots_request.shots)
    session.request_storyboard_from_shots(shots_request.shots, shots_request.context)
    data = await generate_storyboard_from_shots(
        client, shots_request.shots, shots_request.scene_text, shots_request.context
    )
    session.set_storyboard(data)
    return data


@router.post("/image/generate")
@limiter.limit("10/minute")
async def image_generate(
    request: Request,
    image_request: ImageGenerateRequest,
    session: ProjectSession = Depends(get_session),
    studio: ImageStudio = Depends(get_image_studio),
):
    studio.require_prompt(image_request.prompt)
    config = image_request.config.model_copy(update={"mode": ImageStudioMode.GENERATE})
    session.update(image_studio_config=config)
    studio.config = config
    result = await studio.generate(
        image_request.prompt,
        image_request.character_reference,
        image_request.location_reference,
        image_request.continue_scene,
    )
    return {"image_base64": result.image_base64, "continued": result.continued}


@router.post("/image/edit")
@limiter.limit("10/minute")
async def image_edit(
    request: Request,
    edit_request: ImageEditRequest,
    studio: ImageStudio = Depends(get_image_studio),
):
    result = await studio.edit(edit_request.image, edit_request.prompt)
    return {"image_base64": result.image_base64}


@router.post("/image/analyze")
@limiter.limit("10/minute")
async def image_analyze(
    request: Request,
    analyze_request: ImageEditRequest,
    studio: ImageStudio = Depends(get_image_studio),
):
    result = await studio.analyze(analyze_request.image, analyze_request.prompt)
    return {"analysis": result.analysis_text}


@router.post("/video")
@limiter.limit("2/minute")
async def generate_video(
    request: Request,
    video_request: VideoRequest,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    generator = VideoGenerator(client, session.config)
    result = await generator.generate(video_request)
    return result
