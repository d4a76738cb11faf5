"""
Script Sentinel Pipelines

Staged script analysis, pitch-deck visual batches, shot blueprints and video generation.
"""

from .base_pipeline import BasePipeline, PipelineResult, PipelineStatus, PipelineStep
from .analysis_pipeline import AnalysisOutcome, AnalysisPipeline, validate_script
from .visual_batch import VisualAssets, VisualBatchRunner, merge_visuals, plan_visual_requests
from .shot_blueprint import ShotBlueprintGenerator
from .video_pipeline import VideoGenerator

__all__ = [
    "BasePipeline",
    "PipelineResult",
    "PipelineStatus",
    "PipelineStep",
    "AnalysisOutcome",
    "AnalysisPipeline",
    "validate_script",
    "VisualAssets",
    "VisualBatchRunner",
    "merge_visuals",
    "plan_visual_requests",
    "ShotBlueprintGenerator",
    "VideoGenerator",
]
