"""
Analysis Stage Models

Typed results for the three analysis stages. Every model response is
validated against these before it is accepted into a project.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from script_sentinel.core.constants import Department, RoleType, ScreenPresence, TimeOfDay


# =============================================================================
# STAGE 1: STRUCTURAL & NARRATIVE DECONSTRUCTION
# =============================================================================

class ActScene(BaseModel):
    scene_number: int
    setting: str
    summary: str


class Act(BaseModel):
    act_number: int
    title: str
    scene_breakdown: List[ActScene]


class Character(BaseModel):
    name: str
    description: str
    screen_presence: ScreenPresence


class Synopsis(BaseModel):
    brief: str
    extended: str


class IntegrityCheck(BaseModel):
    issues_found: bool
    details: str


class Stage1Result(BaseModel):
    """Structure, characters, synopsis and integrity check."""
    page_count: int = Field(ge=0)
    logline: str
    acts: List[Act]
    characters: List[Character]
    synopsis: Synopsis
    integrity_check: IntegrityCheck


# =============================================================================
# STAGE 2: PITCH DECK
# =============================================================================

class CharacterProfile(Character):
    arc: str
    motivation: str
    image_base64: Optional[str] = None


class Theme(BaseModel):
    theme: str
    prominence: float = Field(ge=1, le=10)


class FinalRating(BaseModel):
    score: float = Field(ge=0, le=10)
    justification: str


class ComparableTitleVisual(BaseModel):
    title: str
    image_base64: str


class Stage2Result(BaseModel):
    """Pitch deck. The visual fields are filled in by the visual batch, never by the model."""
    title: str
    author: str
    genre: str
    tone: str
    logline: str
    world_and_setting: str
    character_profiles: List[CharacterProfile]
    treatment: str
    themes_and_motifs: List[Theme]
    comparable_titles: List[str]
    target_audience: str
    visual_style_suggestion: str
    final_rating: FinalRating
    completion_checklist: List[str]

    concept_art_base64: Optional[str] = None
    comparable_titles_visuals: Optional[List[ComparableTitleVisual]] = None
    visual_style_images_base64: Optional[List[str]] = None

    @property
    def has_visuals(self) -> bool:
        return bool(
            self.concept_art_base64
            or self.comparable_titles_visuals
            or self.visual_style_images_base64
            or any(p.image_base64 for p in self.character_profiles)
        )

    def without_visuals(self) -> "Stage2Result":
        """Copy with every generated asset removed."""
        profiles = [p.model_copy(update={"image_base64": None}) for p in self.character_profiles]
        return self.model_copy(update={
            "character_profiles": profiles,
            "concept_art_base64": None,
            "comparable_titles_visuals": None,
            "visual_style_images_base64": None,
        })


# =============================================================================
# STAGE 3: PRODUCTION BREAKDOWN
# =============================================================================

class BreakdownScene(BaseModel):
    scene_number: int
    page_number: str
    location: str
    time_of_day: TimeOfDay
    estimated_length_eighths: float
    summary: str


class CharacterBreakdown(BaseModel):
    name: str
    role_type: RoleType
    scene_appearances: List[int]


class LocationBreakdown(BaseModel):
    location: str
    scenes: List[int]
    is_unique: bool


class ProductionElement(BaseModel):
    name: str
    description: str
    department: Department


class ShootingDay(BaseModel):
    day: int
    scenes: str
    location: str
    notes: str


class SchedulingSuggestions(BaseModel):
    total_shooting_days: int
    shooting_schedule: List[ShootingDay]
    scene_grouping_suggestions: List[str]
    cast_scheduling_highlights: List[str]
    day_night_balance: str
    complexity_flags: List[str]


class DepartmentalNote(BaseModel):
    department: Department
    notes: str


class Stage3Result(BaseModel):
    """Production breakdown and scheduling suggestions."""
    scene_breakdown: List[BreakdownScene]
    character_breakdown: List[CharacterBreakdown]
    location_breakdown: List[LocationBreakdown]
    props_and_set_dressing: List[ProductionElement]
    wardrobe_and_makeup: List[ProductionElement]
    special_requirements: List[ProductionElement]
    scheduling_suggestions: SchedulingSuggestions
    departmental_notes: List[DepartmentalNote]
    risk_assessment: List[str]


# =============================================================================
# SCENE EXTRACTION
# =============================================================================

class FullScene(BaseModel):
    """One scene of the script, verbatim, for the shot tools."""
    scene_number: int
    heading: str
    content: str


class SceneExtraction(BaseModel):
    scenes: List[FullScene]
