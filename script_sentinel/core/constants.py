"""
Script Sentinel Constants

Global constants used throughout the Script Sentinel system.
"""

from enum import Enum

# =============================================================================
# VERSION INFO
# =============================================================================
VERSION = "1.0.0"
PROJECT_NAME = "Script Sentinel"
DEFAULT_PROJECT_NAME = "Untitled Project"

# =============================================================================
# ANALYSIS PIPELINE
# =============================================================================

class AnalysisStatus(str, Enum):
    """Lifecycle of one analysis run."""
    IDLE = "idle"
    ANALYZING_STAGE_1 = "analyzing_stage_1"
    ANALYZING_STAGE_2 = "analyzing_stage_2"
    ANALYZING_STAGE_2_VISUALS = "analyzing_stage_2_visuals"
    ANALYZING_STAGE_3 = "analyzing_stage_3"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_running(self) -> bool:
        return self not in (AnalysisStatus.IDLE, AnalysisStatus.COMPLETE, AnalysisStatus.ERROR)


# =============================================================================
# SCRIPT DOMAIN ENUMERATIONS
# =============================================================================

class ScreenPresence(str, Enum):
    """Whether a character is seen or only heard."""
    ON_SCREEN = "on-screen"
    OFF_SCREEN = "off-screen"


class TimeOfDay(str, Enum):
    DAY = "DAY"
    NIGHT = "NIGHT"
    DUSK = "DUSK"
    DAWN = "DAWN"


class RoleType(str, Enum):
    SPEAKING = "Speaking"
    EXTRA = "Extra"


class Department(str, Enum):
    """Production departments a breakdown element can belong to."""
    ART = "Art"
    WARDROBE = "Wardrobe"
    MAKEUP = "Makeup"
    STUNTS = "Stunts"
    VFX = "VFX"
    SFX = "SFX"
    LOCATIONS = "Locations"
    PROPS = "Props"
    TRANSPORT = "Transport"
    CAST = "Cast"
    OTHER = "Other"


# =============================================================================
# STUDIO TOOLS
# =============================================================================

class ImageStudioMode(str, Enum):
    GENERATE = "generate"
    EDIT = "edit"
    ANALYZE = "analyze"


class VideoResolution(str, Enum):
    HD = "720p"
    FULL_HD = "1080p"


ASPECT_RATIOS = ["1:1", "3:4", "4:3", "9:16", "16:9"]
UNSPECIFIED = "Unspecified"

# =============================================================================
# VISUAL BATCH LIMITS
# =============================================================================

MAX_CHARACTER_PORTRAITS = 2
MAX_COMPARABLE_POSTERS = 3
STYLE_STILL_COUNT = 3

CONCEPT_ART_ASPECT_RATIO = "16:9"
PORTRAIT_ASPECT_RATIO = "3:4"
POSTER_ASPECT_RATIO = "3:4"
STYLE_STILL_ASPECT_RATIO = "16:9"
SHOT_ASPECT_RATIO = "16:9"
VIDEO_ASPECT_RATIO = "16:9"

IMAGE_OUTPUT_MIME_TYPE = "image/jpeg"

# =============================================================================
# PROVIDER DEFAULTS
# =============================================================================

DEFAULT_TEXT_MODEL = "gemini-2.5-pro"
DEFAULT_FAST_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"
DEFAULT_IMAGE_EDIT_MODEL = "gemini-2.5-flash-image"
DEFAULT_VIDEO_MODEL = "veo-3.1-fast-generate-preview"

RATE_LIMIT_DOCS_URL = "https://ai.google.dev/gemini-api/docs/rate-limits"
USAGE_DASHBOARD_URL = "https://ai.dev/usage?tab=rate-limit"

# =============================================================================
# PROJECT FILES
# =============================================================================

PROJECT_FILE_EXTENSION = ".filmset"
