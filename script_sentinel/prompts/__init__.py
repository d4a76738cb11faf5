"""Prompt and response-schema builders."""

from .analysis_prompts import (
    PromptRequest,
    build_scene_extraction_request,
    build_script_generator_request,
    build_stage1_request,
    build_stage2_request,
    build_stage3_request,
)
from .visual_prompts import build_shot_list_request, shot_image_prompt, storyboard_grid_prompt

__all__ = [
    "PromptRequest",
    "build_scene_extraction_request",
    "build_script_generator_request",
    "build_stage1_request",
    "build_stage2_request",
    "build_stage3_request",
    "build_shot_list_request",
    "shot_image_prompt",
    "storyboard_grid_prompt",
]
