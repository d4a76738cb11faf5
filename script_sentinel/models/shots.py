"""
Shot Blueprint Models
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class SceneOverview(BaseModel):
    """Setting and lighting anchor shared by every shot in a scene."""
    setting_description: str
    lighting_mood: str


class CharacterDesign(BaseModel):
    """Per-character appearance and costume anchor for a scene."""
    name: str
    description: str
    costume: str


class ShotIdea(BaseModel):
    shot_number: int
    shot_type: str
    artistic_style: str
    description: str
    composition_and_framing: str
    lighting: str
    blocking: str
    costume_and_makeup: str
    art_design: str
    image_base64: Optional[str] = None


class ShotContext(BaseModel):
    """Continuity anchors that must be reused unchanged for later storyboard requests."""
    scene_overview: SceneOverview
    character_designs: List[CharacterDesign] = Field(default_factory=list)


class ShotList(BaseModel):
    """Structured response of the shot-list call."""
    scene_overview: SceneOverview
    character_designs: List[CharacterDesign]
    shots: List[ShotIdea]

    @property
    def context(self) -> ShotContext:
        return ShotContext(
            scene_overview=self.scene_overview,
            character_designs=self.character_designs,
        )


class ShotBlueprint(BaseModel):
    """Shot list with images attached, plus the anchors used to render them."""
    shots: List[ShotIdea]
    context: ShotContext


class StoryboardData(BaseModel):
    scene_description: str
    images: List[str] = Field(default_factory=list)
    shot_ideas: Optional[List[ShotIdea]] = None
