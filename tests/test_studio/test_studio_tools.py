"""
Tests for Studio Tools

Tests for script_sentinel/studio/
"""

import pytest

from script_sentinel.core.constants import ImageStudioMode
from script_sentinel.core.exceptions import EmptyResultError, ValidationError
from script_sentinel.models.shots import ShotList
from script_sentinel.models.studio import ImageInput, ImageStudioConfig
from script_sentinel.studio.image_studio import ImageStudio
from script_sentinel.studio.script_writer import generate_script_from_idea
from script_sentinel.studio.storyboard import generate_storyboard_from_shots, generate_storyboard_grid


class TestScriptWriter:
    """Tests for the idea-to-script tool."""

    @pytest.mark.asyncio
    async def test_generates_script(self, fake_client, sentinel_config):
        script = await generate_script_from_idea(fake_client, "A keeper finds the light lit", sentinel_config)

        assert script.startswith("FADE IN:")
        assert fake_client.calls[0][2] == 0.7

    @pytest.mark.asyncio
    async def test_empty_idea(self, fake_client, sentinel_config):
        with pytest.raises(ValidationError, match="Please enter an idea for your script."):
            await generate_script_from_idea(fake_client, " ", sentinel_config)

        assert fake_client.calls == []


class TestStoryboard:
    """Tests for storyboard generation."""

    @pytest.mark.asyncio
    async def test_grid(self, fake_client, png_b64):
        data = await generate_storyboard_grid(fake_client, "Mara climbs the stairs")

        assert data.scene_description == "Mara climbs the stairs"
        assert data.images == [png_b64]
        assert fake_client.calls[0][3] == "16:9"

    @pytest.mark.asyncio
    async def test_grid_no_image(self, fake_client):
        fake_client.image_results = [[]]

        with pytest.raises(EmptyResultError):
            await generate_storyboard_grid(fake_client, "Nothing comes back")

    @pytest.mark.asyncio
    async def test_from_shots(self, fake_client, shot_list_payload):
        shot_list = ShotList.model_validate(shot_list_payload)

        data = await generate_storyboard_from_shots(fake_client, shot_list.shots, "Scene text", shot_list.context)

        assert len(data.images) == 4
        assert [s.shot_number for s in data.shot_ideas] == [1, 2, 3, 4]


class TestImageStudio:
    """Tests for the image studio modes."""

    @pytest.mark.asyncio
    async def test_continuation_chain(self, fake_client):
        studio = ImageStudio(fake_client, ImageStudioConfig(genre="Noir"))

        first = await studio.generate("Mara at the window")
        second = await studio.generate("She turns around", continue_scene=True)

        assert not first.continued
        assert second.continued
        assert any(call[0] == "analyze" for call in fake_client.calls)

    @pytest.mark.asyncio
    async def test_continue_without_previous_image(self, fake_client):
        studio = ImageStudio(fake_client)

        result = await studio.generate("First frame", continue_scene=True)

        assert not result.continued

    @pytest.mark.asyncio
    async def test_references_reset_chain(self, fake_client, png_b64):
        studio = ImageStudio(fake_client)
        await studio.generate("Start")

        result = await studio.generate("With a reference", character_reference=ImageInput(base64=png_b64))

        assert result.image_base64 == png_b64
        assert not studio.can_continue

    @pytest.mark.asyncio
    async def test_edit_requires_image(self, fake_client):
        studio = ImageStudio(fake_client, ImageStudioConfig(mode=ImageStudioMode.EDIT))

        with pytest.raises(ValidationError, match="Please upload an image first"):
            await studio.run("Make it night")

    @pytest.mark.asyncio
    async def test_analyze(self, fake_client, png_b64):
        studio = ImageStudio(fake_client)

        result = await studio.analyze(ImageInput(base64=png_b64), "What is shown?")

        assert "lighthouse keeper" in result.analysis_text

    def test_invalid_base64_rejected(self):
        with pytest.raises(ValueError):
            ImageInput(base64="not base64!!")

    @pytest.mark.parametrize("ratio", ["1:1", "3:4", "4:3", "9:16", "16:9"])
    def test_supported_aspect_ratios(self, ratio):
        assert ImageStudioConfig(aspect_ratio=ratio).aspect_ratio == ratio

    def test_unsupported_aspect_ratio_rejected(self):
        with pytest.raises(ValueError):
            ImageStudioConfig(aspect_ratio="21:9")
