"""Creative studio tools: script generator, image studio and storyboards."""

from .image_studio import ImageStudio, StudioResult
from .script_writer import generate_script_from_idea
from .storyboard import generate_storyboard_from_shots, generate_storyboard_grid

__all__ = [
    "ImageStudio",
    "StudioResult",
    "generate_script_from_idea",
    "generate_storyboard_from_shots",
    "generate_storyboard_grid",
]
