"""
Project Document

The root aggregate persisted by the project store.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from script_sentinel.core.constants import DEFAULT_PROJECT_NAME

from .analysis import FullScene, Stage1Result, Stage2Result, Stage3Result
from .shots import ShotContext, ShotIdea, StoryboardData
from .studio import ImageStudioConfig, ShotStudioConfig


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Project(BaseModel):
    """Script, stage results and per-tool state for one work session."""

    id: Optional[str] = None
    name: str = DEFAULT_PROJECT_NAME
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    script: str = ""
    stage1_result: Optional[Stage1Result] = None
    stage2_result: Optional[Stage2Result] = None
    stage3_result: Optional[Stage3Result] = None
    storyboard_data: Optional[StoryboardData] = None
    shot_ideas_list: Optional[List[ShotIdea]] = None
    full_scenes: Optional[List[FullScene]] = None

    # Tool state, persisted so work can be resumed
    script_generator_idea: str = ""
    shot_idea_studio_config: ShotStudioConfig = Field(default_factory=ShotStudioConfig)
    image_studio_config: ImageStudioConfig = Field(default_factory=ImageStudioConfig)
    storyboard_scene_description: str = ""
    shot_ideas_list_context: Optional[ShotContext] = None
    storyboard_request_from_shots: Optional[List[ShotIdea]] = None
    storyboard_request_context: Optional[ShotContext] = None

    @property
    def is_saved(self) -> bool:
        return self.id is not None

    @property
    def is_analysis_complete(self) -> bool:
        """Only a project with all three stage results may be presented as complete."""
        return (
            self.stage1_result is not None
            and self.stage2_result is not None
            and self.stage3_result is not None
        )

    def clear_analysis(self) -> None:
        self.stage1_result = None
        self.stage2_result = None
        self.stage3_result = None
        self.full_scenes = None
