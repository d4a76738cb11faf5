"""
Script Analysis Pipeline

Runs the staged analysis of a script:

    Stage 1 (structure) -> Stage 2 (pitch deck) -> [Stage 2 visuals] -> Stage 3 (production)
    -> scene extraction

Each stage result is validated before the next stage is issued. Results are
handed to a commit callback as soon as they are produced, so a later failure
leaves earlier stages in place. Every run carries a run id; the callback owner
uses it to ignore results from runs that have been superseded.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from script_sentinel.core.config import SentinelConfig, get_config
from script_sentinel.core.constants import AnalysisStatus
from script_sentinel.core.exceptions import ErrorKind, PipelineStageError, ValidationError
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.analysis import (
    FullScene,
    SceneExtraction,
    Stage1Result,
    Stage2Result,
    Stage3Result,
)
from script_sentinel.prompts import analysis_prompts

from .base_pipeline import BasePipeline, PipelineStatus, PipelineStep
from .visual_batch import VisualBatchRunner, merge_visuals

logger = get_logger("pipelines.analysis")

EMPTY_SCRIPT_MESSAGE = "Script content cannot be empty."
CANCELLED_MESSAGE = "Analysis was cancelled."

StatusCallback = Callable[[str, AnalysisStatus], None]
CommitCallback = Callable[[str, str, Any], bool]


@dataclass
class AnalysisOutcome:
    """Everything one analysis run produced, including partial results on failure."""
    run_id: str
    status: AnalysisStatus = AnalysisStatus.IDLE
    stage1: Optional[Stage1Result] = None
    stage2: Optional[Stage2Result] = None
    stage3: Optional[Stage3Result] = None
    full_scenes: List[FullScene] = field(default_factory=list)
    visual_failures: List[str] = field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    duration_seconds: float = 0.0

    @property
    def is_complete(self) -> bool:
        return self.status == AnalysisStatus.COMPLETE


STEP_STATUS = {
    "stage1": AnalysisStatus.ANALYZING_STAGE_1,
    "stage2": AnalysisStatus.ANALYZING_STAGE_2,
    "stage2_visuals": AnalysisStatus.ANALYZING_STAGE_2_VISUALS,
    "stage3": AnalysisStatus.ANALYZING_STAGE_3,
    "scene_extraction": AnalysisStatus.ANALYZING_STAGE_3,
}


def validate_script(script: Optional[str]) -> str:
    """Reject empty input before anything touches the network."""
    if script is None or not script.strip():
        raise ValidationError(EMPTY_SCRIPT_MESSAGE)
    return script


class AnalysisPipeline(BasePipeline[str, AnalysisOutcome]):
    """Sequential, validated three-stage analysis with optional pitch-deck visuals."""

    def __init__(
        self,
        client,
        with_visuals: bool = False,
        run_id: str = None,
        config: SentinelConfig = None,
        on_status: StatusCallback = None,
        on_commit: CommitCallback = None,
    ):
        self.client = client
        self.with_visuals = with_visuals
        self.run_id = run_id or uuid.uuid4().hex
        self.config = config or get_config()
        self._on_status = on_status
        self._on_commit = on_commit
        self._outcome = AnalysisOutcome(run_id=self.run_id)
        super().__init__("script_analysis")

    def _define_steps(self) -> None:
        self._steps = [
            PipelineStep("stage1", "Structural & narrative deconstruction"),
            PipelineStep("stage2", "Pitch deck creation"),
        ]
        if self.with_visuals:
            self._steps.append(PipelineStep("stage2_visuals", "Pitch deck visuals"))
        self._steps.extend([
            PipelineStep("stage3", "Production breakdown & scheduling"),
            PipelineStep("scene_extraction", "Full scene extraction", required=False),
        ])

    @property
    def outcome(self) -> AnalysisOutcome:
        return self._outcome

    @property
    def analysis_status(self) -> AnalysisStatus:
        return self._outcome.status

    async def analyze(self, script: str) -> AnalysisOutcome:
        """
        Validate the script and run every stage.

        Raises:
            ValidationError: for empty or whitespace-only scripts. No request is made.
        """
        validate_script(script)
        result = await self.run(script)

        outcome = self._outcome
        outcome.duration_seconds = result.duration_seconds
        if result.status == PipelineStatus.COMPLETED:
            self._set_status(AnalysisStatus.COMPLETE)
        elif result.status == PipelineStatus.CANCELLED:
            outcome.error = CANCELLED_MESSAGE
            outcome.error_kind = ErrorKind.CANCELLED
            self._set_status(AnalysisStatus.ERROR)
        else:
            outcome.error = result.error
            outcome.error_kind = result.error_kind
            self._set_status(AnalysisStatus.ERROR)
        logger.info(
            f"Analysis run {self.run_id} finished with {outcome.status.value} "
            f"in {outcome.duration_seconds:.1f}s"
        )
        return outcome

    def _on_step_start(self, step: PipelineStep) -> None:
        status = STEP_STATUS[step.name]
        if status != self._outcome.status:
            self._set_status(status)

    def _set_status(self, status: AnalysisStatus) -> None:
        self._outcome.status = status
        if self._on_status:
            self._on_status(self.run_id, status)

    def _commit(self, field_name: str, value: Any) -> None:
        if self._on_commit:
            self._on_commit(self.run_id, field_name, value)

    def _build_output(self, last_step_output: Any, context: Dict[str, Any]) -> AnalysisOutcome:
        return self._outcome

    async def _execute_step(self, step: PipelineStep, input_data: Any, context: Dict[str, Any]) -> Any:
        script = input_data
        models = self.config.models
        outcome = self._outcome

        if step.name == "stage1":
            request = analysis_prompts.build_stage1_request(script)
            outcome.stage1 = await self._structured(request, Stage1Result, models.stage1_temperature)
            self._commit("stage1_result", outcome.stage1)

        elif step.name == "stage2":
            if outcome.stage1 is None:
                raise PipelineStageError("stage2", "Stage 1 result is missing")
            request = analysis_prompts.build_stage2_request(
                script, outcome.stage1.logline, outcome.stage1.synopsis.extended
            )
            outcome.stage2 = await self._structured(request, Stage2Result, models.stage2_temperature)
            self._commit("stage2_result", outcome.stage2)

        elif step.name == "stage2_visuals":
            runner = VisualBatchRunner(self.client, self._visual_progress)
            assets = await runner.run(outcome.stage2)
            outcome.visual_failures = list(assets.failures)
            if assets.is_empty:
                logger.warning("No pitch deck visuals were generated")
            outcome.stage2 = merge_visuals(outcome.stage2, assets)
            self._commit("stage2_result", outcome.stage2)

        elif step.name == "stage3":
            request = analysis_prompts.build_stage3_request(script)
            outcome.stage3 = await self._structured(request, Stage3Result, models.stage3_temperature)
            self._commit("stage3_result", outcome.stage3)

        elif step.name == "scene_extraction":
            request = analysis_prompts.build_scene_extraction_request(script)
            extraction = await self._structured(
                request, SceneExtraction, models.scene_extraction_temperature
            )
            outcome.full_scenes = extraction.scenes
            self._commit("full_scenes", outcome.full_scenes)

        else:
            raise PipelineStageError(step.name, "unknown step")

        return script

    async def _structured(self, request, result_model, temperature: float):
        return await self.client.generate_structured(
            request.prompt,
            request.schema,
            result_model,
            system_instruction=request.system_instruction,
            temperature=temperature,
        )

    def _visual_progress(self, payload: Dict[str, Any]) -> None:
        if self._progress_callback:
            self._progress_callback({
                **payload,
                'pipeline': self.name,
                'step': 'stage2_visuals',
                'asset': payload.get('step'),
            })
