"""
Tests for Base Pipeline Module

Tests for script_sentinel/pipelines/base_pipeline.py
"""

import pytest

from script_sentinel.core.exceptions import ErrorKind, RateLimitError, ValidationError
from script_sentinel.pipelines.base_pipeline import (
    BasePipeline,
    PipelineStep,
    PipelineResult,
    PipelineStatus
)


class MockPipeline(BasePipeline):
    """Mock pipeline appending each step name to a string."""

    def __init__(self, failures=None, optional=()):
        self.failures = failures or {}
        self.optional = set(optional)
        self.executed = []
        super().__init__("mock_pipeline")

    def _define_steps(self):
        self._steps = [
            PipelineStep(name, f"Mock {name}", required=name not in self.optional)
            for name in ("step1", "step2", "step3")
        ]

    async def _execute_step(self, step, input_data, context):
        self.executed.append(step.name)
        if step.name in self.failures:
            raise self.failures[step.name]
        if step.name == "step2" and context.get("cancel_after_step2"):
            self.cancel()
        return f"{input_data}_{step.name}"


class TestPipelineStep:
    """Tests for PipelineStep class."""

    def test_step_creation(self):
        """Test creating a pipeline step."""
        step = PipelineStep("test_step", "A test step")

        assert step.name == "test_step"
        assert step.description == "A test step"
        assert step.required is True


class TestPipelineResult:
    """Tests for PipelineResult class."""

    def test_result_success(self):
        """Test success property."""
        success = PipelineResult(status=PipelineStatus.COMPLETED, output="done")
        failure = PipelineResult(status=PipelineStatus.FAILED, error="Something went wrong")

        assert success.success is True
        assert failure.success is False
        assert failure.error == "Something went wrong"


class TestBasePipeline:
    """Tests for BasePipeline class."""

    @pytest.mark.asyncio
    async def test_pipeline_data_flow(self):
        """Test data flows through pipeline steps."""
        pipeline = MockPipeline()

        result = await pipeline.run("data")

        assert result.status == PipelineStatus.COMPLETED
        assert result.output == "data_step1_step2_step3"
        assert result.metadata["steps_completed"] == 3
        assert pipeline.status == PipelineStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_required_step_failure(self):
        """A failed required step stops the run and records the error once."""
        pipeline = MockPipeline(failures={"step2": ValidationError("Bad input")})

        result = await pipeline.run("data")

        assert result.status == PipelineStatus.FAILED
        assert result.error == "Bad input"
        assert result.error_kind == ErrorKind.VALIDATION
        assert result.metadata["failed_step"] == "step2"
        assert pipeline.executed == ["step1", "step2"]

    @pytest.mark.asyncio
    async def test_optional_step_failure_is_skipped(self):
        """An optional step that fails is logged and the run carries on."""
        pipeline = MockPipeline(failures={"step2": RuntimeError("boom")}, optional=["step2"])

        result = await pipeline.run("data")

        assert result.status == PipelineStatus.COMPLETED
        assert pipeline.executed == ["step1", "step2", "step3"]

    @pytest.mark.asyncio
    async def test_rate_limit_aborts_optional_step(self):
        """Rate limits abort the run even from an optional step."""
        pipeline = MockPipeline(failures={"step2": RateLimitError("quota")}, optional=["step2"])

        result = await pipeline.run("data")

        assert result.status == PipelineStatus.FAILED
        assert result.error_kind == ErrorKind.RATE_LIMIT
        assert "step3" not in pipeline.executed

    @pytest.mark.asyncio
    async def test_cancel_before_next_step(self):
        """Cancelling stops the run before the next step starts."""
        pipeline = MockPipeline()

        result = await pipeline.run("data", {"cancel_after_step2": True})

        assert result.status == PipelineStatus.CANCELLED
        assert result.error_kind == ErrorKind.CANCELLED
        assert result.metadata["cancelled_before"] == "step3"
        assert pipeline.executed == ["step1", "step2"]

    @pytest.mark.asyncio
    async def test_progress_callback(self):
        """Progress is reported once per step."""
        pipeline = MockPipeline()
        updates = []
        pipeline.set_progress_callback(updates.append)

        await pipeline.run("data")

        assert [u["step"] for u in updates] == ["step1", "step2", "step3"]
        assert updates[-1]["percent"] == 100

    def test_pipeline_name_and_steps(self):
        """Test pipeline name and step listing."""
        pipeline = MockPipeline()

        steps = pipeline.steps

        assert pipeline.name == "mock_pipeline"
        assert [s.name for s in steps] == ["step1", "step2", "step3"]
        assert pipeline.progress == 0.0


class TestPipelineStatus:
    """Tests for PipelineStatus enum."""

    def test_status_values(self):
        """Test status enum values."""
        assert PipelineStatus.PENDING.value == "pending"
        assert PipelineStatus.RUNNING.value == "running"
        assert PipelineStatus.COMPLETED.value == "completed"
        assert PipelineStatus.FAILED.value == "failed"
        assert PipelineStatus.CANCELLED.value == "cancelled"
