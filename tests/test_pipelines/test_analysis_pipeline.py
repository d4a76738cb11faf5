"""
Tests for Script Analysis Pipeline

Tests for script_sentinel/pipelines/analysis_pipeline.py
"""

import pytest

from script_sentinel.core.constants import AnalysisStatus
from script_sentinel.core.exceptions import ErrorKind, MalformedResponseError, ServiceUnavailableError, ValidationError
from script_sentinel.models.analysis import SceneExtraction, Stage1Result, Stage3Result
from script_sentinel.pipelines.analysis_pipeline import AnalysisPipeline, validate_script


class TestValidateScript:
    """Tests for input validation."""

    @pytest.mark.parametrize("script", ["", "   ", "\n\t", None])
    def test_rejects_empty(self, script):
        with pytest.raises(ValidationError):
            validate_script(script)

    def test_accepts_text(self):
        assert validate_script("INT. ROOM - DAY") == "INT. ROOM - DAY"


class TestAnalysisPipeline:
    """Tests for the staged analysis."""

    def test_steps_without_visuals(self, fake_client, sentinel_config):
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)

        assert [s.name for s in pipeline.steps] == ["stage1", "stage2", "stage3", "scene_extraction"]

    def test_steps_with_visuals(self, fake_client, sentinel_config):
        pipeline = AnalysisPipeline(fake_client, with_visuals=True, config=sentinel_config)

        assert [s.name for s in pipeline.steps] == [
            "stage1", "stage2", "stage2_visuals", "stage3", "scene_extraction"
        ]

    @pytest.mark.asyncio
    async def test_stages_run_in_order(self, fake_client, sentinel_config, sample_script):
        statuses = []
        commits = []
        pipeline = AnalysisPipeline(
            fake_client,
            config=sentinel_config,
            on_status=lambda run_id, status: statuses.append(status),
            on_commit=lambda run_id, name, value: commits.append(name) or True,
        )

        outcome = await pipeline.analyze(sample_script)

        assert outcome.is_complete
        assert [c[1] for c in fake_client.calls] == [
            "Stage1Result", "Stage2Result", "Stage3Result", "SceneExtraction"
        ]
        assert statuses == [
            AnalysisStatus.ANALYZING_STAGE_1,
            AnalysisStatus.ANALYZING_STAGE_2,
            AnalysisStatus.ANALYZING_STAGE_3,
            AnalysisStatus.COMPLETE,
        ]
        assert commits == ["stage1_result", "stage2_result", "stage3_result", "full_scenes"]

    @pytest.mark.asyncio
    async def test_stage2_prompt_carries_stage1_context(self, fake_client, sentinel_config, sample_script):
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)

        await pipeline.analyze(sample_script)

        stage2_prompt = fake_client.calls[1][2]
        assert "Logline: A lighthouse keeper discovers" in stage2_prompt
        assert "Mara finds the light lit and waits for dawn." in stage2_prompt
        assert sample_script in stage2_prompt

    @pytest.mark.asyncio
    async def test_empty_script_raises_before_any_call(self, fake_client, sentinel_config):
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)

        with pytest.raises(ValidationError):
            await pipeline.analyze("  ")

        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_stage1_failure_stops_before_stage2(self, fake_client, sentinel_config, sample_script):
        fake_client.responses[Stage1Result] = MalformedResponseError("Stage1Result", "invalid JSON")
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)

        outcome = await pipeline.analyze(sample_script)

        assert outcome.status == AnalysisStatus.ERROR
        assert outcome.error_kind == ErrorKind.MALFORMED_RESPONSE
        assert outcome.stage1 is None
        assert outcome.stage2 is None
        assert len(fake_client.calls) == 1

    @pytest.mark.asyncio
    async def test_stage3_unavailable(self, fake_client, sentinel_config, sample_script):
        fake_client.responses[Stage3Result] = ServiceUnavailableError("model overloaded")
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)

        outcome = await pipeline.analyze(sample_script)

        assert outcome.status == AnalysisStatus.ERROR
        assert outcome.error_kind == ErrorKind.UNAVAILABLE
        assert outcome.stage1 is not None
        assert outcome.stage2 is not None
        assert outcome.stage3 is None
        assert "high demand" in outcome.error

    @pytest.mark.asyncio
    async def test_scene_extraction_failure_is_not_fatal(self, fake_client, sentinel_config, sample_script):
        fake_client.responses[SceneExtraction] = MalformedResponseError("SceneExtraction", "empty response")
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)

        outcome = await pipeline.analyze(sample_script)

        assert outcome.is_complete
        assert outcome.full_scenes == []

    @pytest.mark.asyncio
    async def test_visuals_declined_makes_no_image_calls(self, fake_client, sentinel_config, sample_script):
        pipeline = AnalysisPipeline(fake_client, with_visuals=False, config=sentinel_config)

        outcome = await pipeline.analyze(sample_script)

        assert not any(call[0] == "images" for call in fake_client.calls)
        assert not outcome.stage2.has_visuals

    @pytest.mark.asyncio
    async def test_visuals_accepted(self, fake_client, sentinel_config, sample_script, png_b64):
        progress = []
        pipeline = AnalysisPipeline(fake_client, with_visuals=True, config=sentinel_config)
        pipeline.set_progress_callback(progress.append)

        outcome = await pipeline.analyze(sample_script)

        assert outcome.is_complete
        assert outcome.stage2.concept_art_base64 == png_b64
        assert any(p.get("asset") == "concept_art" for p in progress)
        image_calls = [c for c in fake_client.calls if c[0] == "images"]
        assert len(image_calls) == 7

    @pytest.mark.asyncio
    async def test_cancel_before_next_step(self, fake_client, sentinel_config, sample_script):
        pipeline = AnalysisPipeline(fake_client, config=sentinel_config)
        fake_client.hooks[Stage1Result] = pipeline.cancel

        outcome = await pipeline.analyze(sample_script)

        assert outcome.status == AnalysisStatus.ERROR
        assert outcome.error_kind == ErrorKind.CANCELLED
        assert outcome.stage1 is not None
        assert outcome.stage2 is None
