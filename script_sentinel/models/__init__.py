"""Pydantic models for analysis results, shots, studio inputs and projects."""

from .analysis import (
    Act,
    ActScene,
    BreakdownScene,
    Character,
    CharacterBreakdown,
    CharacterProfile,
    ComparableTitleVisual,
    DepartmentalNote,
    FinalRating,
    FullScene,
    IntegrityCheck,
    LocationBreakdown,
    ProductionElement,
    SceneExtraction,
    SchedulingSuggestions,
    ShootingDay,
    Stage1Result,
    Stage2Result,
    Stage3Result,
    Synopsis,
    Theme,
)
from .project import Project
from .shots import (
    CharacterDesign,
    SceneOverview,
    ShotBlueprint,
    ShotContext,
    ShotIdea,
    ShotList,
    StoryboardData,
)
from .studio import ImageInput, ImageStudioConfig, ShotStudioConfig, VideoRequest, VideoResult

__all__ = [
    "Act",
    "ActScene",
    "BreakdownScene",
    "Character",
    "CharacterBreakdown",
    "CharacterProfile",
    "ComparableTitleVisual",
    "DepartmentalNote",
    "FinalRating",
    "FullScene",
    "IntegrityCheck",
    "LocationBreakdown",
    "ProductionElement",
    "SceneExtraction",
    "SchedulingSuggestions",
    "ShootingDay",
    "Stage1Result",
    "Stage2Result",
    "Stage3Result",
    "Synopsis",
    "Theme",
    "Project",
    "CharacterDesign",
    "SceneOverview",
    "ShotBlueprint",
    "ShotContext",
    "ShotIdea",
    "ShotList",
    "StoryboardData",
    "ImageInput",
    "ImageStudioConfig",
    "ShotStudioConfig",
    "VideoRequest",
    "VideoResult",
]
