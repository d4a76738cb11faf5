"""
Script Sentinel Base Pipeline

Abstract base class for all processing pipelines.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from script_sentinel.core.exceptions import ErrorKind, classify_error, is_rate_limit_error, user_message
from script_sentinel.core.logging_config import get_logger

logger = get_logger("pipelines.base")

InputT = TypeVar('InputT')
OutputT = TypeVar('OutputT')

ProgressCallback = Callable[[Dict[str, Any]], None]


class PipelineStatus(Enum):
    """Status of a pipeline execution."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class PipelineResult(Generic[OutputT]):
    """Result from a pipeline execution."""
    status: PipelineStatus
    output: Optional[OutputT] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    duration_seconds: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status == PipelineStatus.COMPLETED


@dataclass
class PipelineStep:
    """A step in a pipeline."""
    name: str
    description: str
    required: bool = True


class BasePipeline(ABC, Generic[InputT, OutputT]):
    """
    Abstract base class for processing pipelines.

    Features:
    - Step-based execution
    - Progress tracking
    - Error handling: a failed optional step is logged and skipped, except
      rate-limit failures which always abort the run
    - Cancellation support
    """

    def __init__(self, name: str):
        """
        Initialize the pipeline.

        Args:
            name: Pipeline name
        """
        self.name = name
        self._steps: List[PipelineStep] = []
        self._current_step: int = 0
        self._status = PipelineStatus.PENDING
        self._cancelled = False
        self._progress_callback: Optional[ProgressCallback] = None

        self._define_steps()

    @abstractmethod
    def _define_steps(self) -> None:
        """Define the pipeline steps. Override in subclasses."""
        pass

    @abstractmethod
    async def _execute_step(
        self,
        step: PipelineStep,
        input_data: Any,
        context: Dict[str, Any]
    ) -> Any:
        """Execute a single step. Override in subclasses."""
        pass

    def _on_step_start(self, step: PipelineStep) -> None:
        """Hook called before each step runs."""

    def _on_failure(self, step: Optional[PipelineStep], error: Exception) -> None:
        """Hook called once when the run fails."""

    def _build_output(self, last_step_output: Any, context: Dict[str, Any]) -> OutputT:
        """Assemble the final output. Defaults to the last step's output."""
        return last_step_output

    async def run(
        self,
        input_data: InputT,
        context: Dict[str, Any] = None
    ) -> PipelineResult[OutputT]:
        """
        Run the pipeline.

        Args:
            input_data: Input data
            context: Additional context shared by all steps

        Returns:
            PipelineResult with output
        """
        context = context if context is not None else {}
        start_time = datetime.now()

        self._status = PipelineStatus.RUNNING
        self._current_step = 0
        self._cancelled = False

        logger.info(f"Starting pipeline: {self.name}")

        step = None
        try:
            current_data = input_data

            for i, step in enumerate(self._steps):
                if self._cancelled:
                    self._status = PipelineStatus.CANCELLED
                    return PipelineResult(
                        status=PipelineStatus.CANCELLED,
                        output=self._build_output(current_data, context),
                        error_kind=ErrorKind.CANCELLED,
                        duration_seconds=self._get_duration(start_time),
                        metadata={'cancelled_before': step.name}
                    )

                self._current_step = i
                self._on_step_start(step)
                self._report_progress(step, i, len(self._steps))

                logger.debug(f"Executing step: {step.name}")

                try:
                    current_data = await self._execute_step(step, current_data, context)
                except Exception as e:
                    if step.required or is_rate_limit_error(e):
                        raise
                    logger.warning(f"Optional step failed: {step.name} - {e}")

            self._status = PipelineStatus.COMPLETED

            return PipelineResult(
                status=PipelineStatus.COMPLETED,
                output=self._build_output(current_data, context),
                duration_seconds=self._get_duration(start_time),
                metadata={'steps_completed': len(self._steps)}
            )

        except Exception as e:
            self._status = PipelineStatus.FAILED
            logger.error(f"Pipeline failed: {self.name} - {e}")
            self._on_failure(step, e)

            return PipelineResult(
                status=PipelineStatus.FAILED,
                output=self._build_output(None, context),
                error=user_message(e),
                error_kind=classify_error(e),
                duration_seconds=self._get_duration(start_time),
                metadata={'failed_step': step.name if step else None}
            )

    def cancel(self) -> None:
        """Cancel the pipeline execution before its next step."""
        self._cancelled = True
        logger.info(f"Pipeline cancelled: {self.name}")

    def set_progress_callback(self, callback: Optional[ProgressCallback]) -> None:
        """Set a callback for progress updates."""
        self._progress_callback = callback

    def _report_progress(
        self,
        step: PipelineStep,
        current: int,
        total: int,
        **extra: Any
    ) -> None:
        """Report progress to callback."""
        if self._progress_callback:
            payload = {
                'pipeline': self.name,
                'step': step.name,
                'current': current + 1,
                'total': total,
                'percent': (current + 1) / total * 100
            }
            payload.update(extra)
            self._progress_callback(payload)

    def _get_duration(self, start_time: datetime) -> float:
        """Get duration since start time."""
        return (datetime.now() - start_time).total_seconds()

    @property
    def status(self) -> PipelineStatus:
        return self._status

    @property
    def progress(self) -> float:
        """Get current progress (0-1)."""
        if not self._steps:
            return 0.0
        return self._current_step / len(self._steps)

    @property
    def steps(self) -> List[PipelineStep]:
        return self._steps.copy()
