"""
Project Session

Holds the single "current project" and is the only writer to it. Analysis
results are committed through run-guarded callbacks: each analysis run gets
an id, and a commit or status update carrying any id other than the active
one is dropped. Starting a new project, loading or importing also
invalidates the active run.
"""

import asyncio
import uuid
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from script_sentinel.core.config import SentinelConfig, get_config
from script_sentinel.core.constants import AnalysisStatus
from script_sentinel.core.exceptions import (
    ErrorKind,
    MessageLink,
    ValidationError,
    classify_error,
    extract_message_links,
    user_message,
)
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.project import Project, utc_now
from script_sentinel.models.shots import ShotContext, ShotIdea, StoryboardData
from script_sentinel.pipelines.analysis_pipeline import AnalysisOutcome, AnalysisPipeline, validate_script
from script_sentinel.pipelines.visual_batch import VisualAssets, VisualBatchRunner, merge_visuals
from script_sentinel.store.project_store import ProjectStore
from script_sentinel.store.serialization import export_filename, export_project, import_project

logger = get_logger("core.project_session")

ANALYSIS_FIELDS = {"stage1_result", "stage2_result", "stage3_result", "full_scenes"}

TOOL_FIELDS = {
    "name",
    "script",
    "script_generator_idea",
    "shot_idea_studio_config",
    "image_studio_config",
    "storyboard_scene_description",
    "storyboard_data",
    "shot_ideas_list",
    "shot_ideas_list_context",
    "storyboard_request_from_shots",
    "storyboard_request_context",
}


class ProjectSession:
    """The current project plus the analysis status shown to the user."""

    def __init__(self, store: ProjectStore, config: SentinelConfig = None, autosave: bool = False):
        self.store = store
        self.config = config or get_config()
        self.autosave = autosave
        self.current = Project()
        self.status = AnalysisStatus.IDLE
        self.error: Optional[str] = None
        self.error_kind: Optional[ErrorKind] = None
        self._active_run_id: Optional[str] = None
        self._autosave_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------ run guard

    @property
    def active_run_id(self) -> Optional[str]:
        return self._active_run_id

    def is_active(self, run_id: str) -> bool:
        return run_id is not None and run_id == self._active_run_id

    def _begin_run(self) -> str:
        self._active_run_id = uuid.uuid4().hex
        return self._active_run_id

    def _invalidate_run(self) -> None:
        if self._active_run_id:
            logger.debug(f"Invalidating run {self._active_run_id}")
        self._active_run_id = None

    def _on_status(self, run_id: str, status: AnalysisStatus) -> None:
        if not self.is_active(run_id):
            logger.debug(f"Ignoring status {status.value} from stale run {run_id}")
            return
        self.status = status

    def _on_commit(self, run_id: str, field_name: str, value: Any) -> bool:
        if not self.is_active(run_id):
            logger.info(f"Dropped late '{field_name}' result from stale run {run_id}")
            return False
        if field_name not in ANALYSIS_FIELDS:
            raise ValueError(f"Not an analysis field: {field_name}")
        setattr(self.current, field_name, value)
        self._schedule_autosave()
        return True

    # -------------------------------------------------------------- analysis

    async def run_analysis(self, client, script: str, with_visuals: bool = False) -> AnalysisOutcome:
        """
        Start a fresh analysis run for ``script``.

        Previous stage results are discarded. Raises ValidationError for an
        empty script without changing any state.
        """
        validate_script(script)
        run_id = self._begin_run()
        self.current.script = script
        self.current.clear_analysis()
        self._clear_error()

        pipeline = AnalysisPipeline(
            client,
            with_visuals=with_visuals,
            run_id=run_id,
            config=self.config,
            on_status=self._on_status,
            on_commit=self._on_commit,
        )
        outcome = await pipeline.analyze(script)

        if self.is_active(run_id) and outcome.status == AnalysisStatus.ERROR:
            self.error = outcome.error
            self.error_kind = outcome.error_kind
        return outcome

    async def regenerate_visuals(self, client) -> VisualAssets:
        """
        Re-run the pitch-deck visual batch for the current Stage 2 result.

        Each asset category that produced output replaces the existing one;
        categories that produced nothing keep their previous assets. Rejected
        while an analysis or visual run is in progress.
        """
        deck = self.current.stage2_result
        if deck is None:
            raise ValidationError("Run the pitch deck analysis before generating visuals.")
        if self.status.is_running:
            raise ValidationError("Analysis in progress; wait for it to finish before regenerating visuals.")

        run_id = self._begin_run()
        project = self.current
        self._clear_error()
        self.status = AnalysisStatus.ANALYZING_STAGE_2_VISUALS
        try:
            assets = await VisualBatchRunner(client).run(deck)
        except Exception as e:
            if self.is_active(run_id):
                self.record_error(e)
                self.status = AnalysisStatus.ERROR
            raise

        if not self.is_active(run_id) or self.current is not project:
            logger.info("Discarding visuals generated for a project that is no longer current")
            return assets
        self.current.stage2_result = merge_visuals(self.current.stage2_result, assets)
        self.status = AnalysisStatus.COMPLETE if self.current.is_analysis_complete else AnalysisStatus.IDLE
        self._schedule_autosave()
        return assets

    # ----------------------------------------------------------------- errors

    def record_error(self, error: BaseException) -> str:
        """Store the single user-facing message for a fatal failure."""
        self.error = user_message(error)
        self.error_kind = classify_error(error)
        logger.error(f"{self.error_kind.value}: {error}")
        return self.error

    @property
    def error_links(self) -> List[MessageLink]:
        return extract_message_links(self.error or "")

    def _clear_error(self) -> None:
        self.error = None
        self.error_kind = None

    # ------------------------------------------------------------ tool state

    def update(self, **fields: Any) -> Project:
        """Set tool-state fields on the current project."""
        unknown = set(fields) - TOOL_FIELDS
        if unknown:
            raise ValidationError(f"Unknown project field(s): {', '.join(sorted(unknown))}")
        try:
            validated = Project.model_validate({**self.current.model_dump(), **fields})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project field value: {e.error_count()} error(s)", {"errors": e.errors()}) from e
        for name in fields:
            setattr(self.current, name, getattr(validated, name))
        self._schedule_autosave()
        return self.current

    def update_saved(self, project_id: str, **fields: Any) -> Project:
        """Set tool-state fields on a stored project and persist it."""
        if self.current.id == project_id:
            self.update(**fields)
            return self.save()
        unknown = set(fields) - TOOL_FIELDS
        if unknown:
            raise ValidationError(f"Unknown project field(s): {', '.join(sorted(unknown))}")
        stored = self.store.require(project_id)
        try:
            project = Project.model_validate({**stored.model_dump(), **fields, "updated_at": utc_now()})
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid project field value: {e.error_count()} error(s)", {"errors": e.errors()}) from e
        self.store.update(project)
        return project

    def set_shot_ideas(self, shots: Optional[List[ShotIdea]], context: Optional[ShotContext]) -> None:
        self.update(shot_ideas_list=shots, shot_ideas_list_context=context)

    def set_storyboard(self, data: Optional[StoryboardData]) -> None:
        self.update(storyboard_data=data)

    def request_storyboard_from_shots(self, shots: List[ShotIdea], context: ShotContext) -> None:
        """Hand a shot list and its anchors over to the storyboard tool unchanged."""
        self.update(storyboard_request_from_shots=shots, storyboard_request_context=context)

    # -------------------------------------------------------------- lifecycle

    def new_project(self) -> Project:
        self._invalidate_run()
        self._cancel_autosave()
        self.current = Project()
        self.status = AnalysisStatus.IDLE
        self._clear_error()
        return self.current

    def save(self, name: str = None) -> Project:
        """
        Persist the current project.

        A first save requires a name and stamps ``created_at``; later saves
        only refresh ``updated_at``.
        """
        project = self.current
        if not project.is_saved:
            name = (name or "").strip()
            if not name:
                raise ValidationError("Project name is required.")
            now = utc_now()
            project.name = name
            project.created_at = now
            project.updated_at = now
            project.id = self.store.create(project)
            logger.info(f"Saved new project '{name}' ({project.id})")
        else:
            if name and name.strip():
                project.name = name.strip()
            project.updated_at = utc_now()
            self.store.update(project)
            logger.debug(f"Saved project {project.id}")
        return project

    def load(self, project_id: str) -> Project:
        project = self.store.require(project_id)
        self._invalidate_run()
        self._cancel_autosave()
        self.current = project
        self.status = AnalysisStatus.COMPLETE if project.stage3_result else AnalysisStatus.IDLE
        self._clear_error()
        return project

    def delete(self, project_id: str) -> None:
        self.store.delete(project_id)
        if self.current.id == project_id:
            self.new_project()

    def import_file(self, data) -> Project:
        project = import_project(data)
        self._invalidate_run()
        self._cancel_autosave()
        self.current = project
        self.status = AnalysisStatus.COMPLETE if project.stage3_result else AnalysisStatus.IDLE
        self._clear_error()
        return project

    def export_file(self) -> Tuple[str, str]:
        """Return (filename, JSON text) for the current project."""
        return export_filename(self.current.name), export_project(self.current)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "links": [{"url": link.url, "label": link.label} for link in self.error_links],
            "project_id": self.current.id,
            "is_complete": self.current.is_analysis_complete,
        }

    # --------------------------------------------------------------- autosave

    def _schedule_autosave(self) -> None:
        if not self.autosave or not self.current.is_saved:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._cancel_autosave()
        self._autosave_task = loop.create_task(self._autosave_after_delay(self.current))

    def _cancel_autosave(self) -> None:
        if self._autosave_task and not self._autosave_task.done():
            self._autosave_task.cancel()
        self._autosave_task = None

    async def _autosave_after_delay(self, project: Project) -> None:
        await asyncio.sleep(self.config.store.autosave_debounce_seconds)
        if self.current is not project:
            return
        try:
            self.save()
        except Exception as e:
            logger.warning(f"Auto-save failed for project {project.id}: {e}")
