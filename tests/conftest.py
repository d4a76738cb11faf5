"""
Pytest Configuration and Fixtures

Shared fixtures for all tests.
"""

import base64
import copy
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List

import pytest

from script_sentinel.core.config import get_default_config
from script_sentinel.core.exceptions import MalformedResponseError
from script_sentinel.llm.api_clients import VideoOperation
from script_sentinel.models.analysis import SceneExtraction, Stage1Result, Stage2Result, Stage3Result
from script_sentinel.models.shots import ShotList

PNG_B64 = base64.b64encode(b"\x89PNG fake image bytes").decode("ascii")

SAMPLE_SCRIPT = """INT. LIGHTHOUSE - NIGHT

MARA (40s) climbs the spiral stairs, lantern in hand.

MARA
Someone has been keeping the light.

EXT. CLIFFS - DAWN

Waves break below. Mara watches a boat approach.
"""


class FakeGeminiClient:
    """
    In-process stand-in for GeminiClient.

    Structured calls are answered from ``responses`` keyed by result model;
    a value that is an exception is raised instead. Image calls pop from
    ``image_results`` (exceptions are raised) and fall back to PNG_B64.
    Every call is recorded in ``calls``.
    """

    def __init__(self, responses: Dict[type, Any] = None, image_results: List[Any] = None):
        self.responses = responses or {}
        self.image_results = list(image_results or [])
        self.calls: List[tuple] = []
        self.hooks: Dict[type, Any] = {}

    async def generate_structured(self, prompt, schema, result_model, system_instruction=None,
                                  temperature=None, model=None):
        self.calls.append(("structured", result_model.__name__, prompt))
        hook = self.hooks.get(result_model)
        if hook:
            hook()
        payload = self.responses.get(result_model)
        if isinstance(payload, Exception):
            raise payload
        if payload is None:
            raise MalformedResponseError(result_model.__name__, "empty response")
        return result_model.model_validate(copy.deepcopy(payload))

    async def generate_text(self, prompt, system_instruction=None, temperature=None, model=None):
        self.calls.append(("text", prompt, temperature))
        return "FADE IN:\n\nINT. GENERATED - DAY"

    async def generate_images(self, prompt, number_of_images=1, aspect_ratio="16:9", model=None):
        self.calls.append(("images", prompt, number_of_images, aspect_ratio))
        if self.image_results:
            result = self.image_results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        return [PNG_B64] * number_of_images

    async def generate_image(self, prompt, aspect_ratio="16:9"):
        images = await self.generate_images(prompt, 1, aspect_ratio)
        return images[0]

    async def compose_image(self, prompt, references):
        self.calls.append(("compose", prompt, len(references)))
        return PNG_B64

    async def edit_image(self, image, prompt):
        self.calls.append(("edit", prompt))
        return PNG_B64

    async def analyze_image(self, image, prompt=None, model=None):
        self.calls.append(("analyze", prompt))
        return "A lighthouse keeper in a yellow raincoat, lantern in the left hand."


class FakeVideoClient:
    """Video half of the client: scripted poll results and a recorded download."""

    def __init__(self, polls: List[VideoOperation], start: VideoOperation = None):
        self.start = start or VideoOperation(name="operations/veo-1", done=False)
        self.polls = list(polls)
        self.poll_count = 0
        self.downloads: List[tuple] = []

    async def start_video(self, request):
        return self.start

    async def poll_video(self, operation):
        self.poll_count += 1
        if self.polls:
            return self.polls.pop(0)
        return operation

    async def download_video(self, uri, destination):
        self.downloads.append((uri, destination))
        return Path(destination)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sentinel_config(temp_dir):
    """Default configuration writing into the temp directory, with fast polling."""
    config = get_default_config()
    config.logs_dir = temp_dir / "logs"
    config.store.projects_dir = temp_dir / "projects"
    config.store.autosave_debounce_seconds = 0.01
    config.video.output_dir = temp_dir / "videos"
    config.video.poll_interval_seconds = 0.01
    return config


@pytest.fixture
def sample_script() -> str:
    return SAMPLE_SCRIPT


@pytest.fixture
def stage1_payload() -> Dict[str, Any]:
    return {
        "page_count": 2,
        "logline": "A lighthouse keeper discovers someone else has been tending her light.",
        "acts": [
            {
                "act_number": 1,
                "title": "Act I: The Light",
                "scene_breakdown": [
                    {"scene_number": 1, "setting": "INT. LIGHTHOUSE - NIGHT", "summary": "Mara climbs the stairs."},
                ],
            },
            {
                "act_number": 2,
                "title": "Act II: The Boat",
                "scene_breakdown": [
                    {"scene_number": 2, "setting": "EXT. CLIFFS - DAWN", "summary": "A boat approaches."},
                ],
            },
        ],
        "characters": [
            {"name": "Mara", "description": "A weathered keeper.", "screen_presence": "on-screen"},
            {"name": "Narrator", "description": "Voice of the sea.", "screen_presence": "off-screen"},
        ],
        "synopsis": {"brief": "Mara finds the light lit.", "extended": "Mara finds the light lit and waits for dawn."},
        "integrity_check": {"issues_found": False, "details": "None."},
    }


@pytest.fixture
def stage2_payload() -> Dict[str, Any]:
    return {
        "title": "The Keeper",
        "author": "Concept Expansion",
        "genre": "Mystery",
        "tone": "Brooding",
        "logline": "A lighthouse keeper discovers someone else has been tending her light.",
        "world_and_setting": "A remote northern coast.",
        "character_profiles": [
            {"name": "Mara", "description": "Keeper.", "screen_presence": "on-screen",
             "arc": "From isolation to trust.", "motivation": "Protect the light."},
            {"name": "Narrator", "description": "Voice.", "screen_presence": "off-screen",
             "arc": "None.", "motivation": "Tell the tale."},
            {"name": "Jonah", "description": "Boatman.", "screen_presence": "on-screen",
             "arc": "Returns home.", "motivation": "Find his sister."},
            {"name": "Ada", "description": "Child.", "screen_presence": "on-screen",
             "arc": "Learns the truth.", "motivation": "Curiosity."},
        ],
        "treatment": "Mara keeps the light alone until the night it burns without her.",
        "themes_and_motifs": [{"theme": "Isolation", "prominence": 9}],
        "comparable_titles": ["The Lighthouse", "The Others", "Shutter Island", "Rebecca"],
        "target_audience": "Adults 25-54",
        "visual_style_suggestion": "Desaturated blues with warm lantern light.",
        "final_rating": {"score": 7.5, "justification": "Strong hook."},
        "completion_checklist": ["Logline", "Treatment"],
    }


@pytest.fixture
def stage3_payload() -> Dict[str, Any]:
    return {
        "scene_breakdown": [
            {"scene_number": 1, "page_number": "1", "location": "LIGHTHOUSE", "time_of_day": "NIGHT",
             "estimated_length_eighths": 4, "summary": "Mara climbs."},
        ],
        "character_breakdown": [{"name": "Mara", "role_type": "Speaking", "scene_appearances": [1, 2]}],
        "location_breakdown": [{"location": "LIGHTHOUSE", "scenes": [1], "is_unique": True}],
        "props_and_set_dressing": [{"name": "Lantern", "description": "Brass.", "department": "Props"}],
        "wardrobe_and_makeup": [{"name": "Raincoat", "description": "Yellow.", "department": "Wardrobe"}],
        "special_requirements": [],
        "scheduling_suggestions": {
            "total_shooting_days": 2,
            "shooting_schedule": [{"day": 1, "scenes": "1", "location": "LIGHTHOUSE", "notes": "Night shoot."}],
            "scene_grouping_suggestions": ["Group lighthouse interiors."],
            "cast_scheduling_highlights": ["Mara every day."],
            "day_night_balance": "One night, one dawn.",
            "complexity_flags": [],
        },
        "departmental_notes": [{"department": "Locations", "notes": "Coastal permit."}],
        "risk_assessment": ["Weather."],
    }


@pytest.fixture
def scenes_payload() -> Dict[str, Any]:
    return {
        "scenes": [
            {"scene_number": 1, "heading": "INT. LIGHTHOUSE - NIGHT", "content": "INT. LIGHTHOUSE - NIGHT\n..."},
            {"scene_number": 2, "heading": "EXT. CLIFFS - DAWN", "content": "EXT. CLIFFS - DAWN\n..."},
        ]
    }


@pytest.fixture
def shot_list_payload() -> Dict[str, Any]:
    shots = []
    for number, shot_type in enumerate(["Establishing Shot", "Medium Shot", "Close-Up", "Over the Shoulder"], 1):
        shots.append({
            "shot_number": number,
            "shot_type": shot_type,
            "artistic_style": "Cinematic Realism",
            "description": f"Shot {number} of Mara on the stairs.",
            "composition_and_framing": "Rule of thirds.",
            "lighting": "Low-key lantern light.",
            "blocking": "Mara climbs.",
            "costume_and_makeup": "Yellow raincoat.",
            "art_design": "Iron stairs.",
        })
    return {
        "scene_overview": {"setting_description": "A cramped iron spiral stair.", "lighting_mood": "Cold night, warm lantern."},
        "character_designs": [{"name": "Mara", "description": "40s, wiry.", "costume": "Yellow raincoat, wool cap."}],
        "shots": shots,
    }


@pytest.fixture
def analysis_responses(stage1_payload, stage2_payload, stage3_payload, scenes_payload) -> Dict[type, Any]:
    return {
        Stage1Result: stage1_payload,
        Stage2Result: stage2_payload,
        Stage3Result: stage3_payload,
        SceneExtraction: scenes_payload,
    }


@pytest.fixture
def fake_client(analysis_responses, shot_list_payload) -> FakeGeminiClient:
    responses = dict(analysis_responses)
    responses[ShotList] = shot_list_payload
    return FakeGeminiClient(responses)


@pytest.fixture
def make_client():
    """Factory for FakeGeminiClient, for tests that script their own responses."""
    return FakeGeminiClient


@pytest.fixture
def make_video_client():
    return FakeVideoClient


@pytest.fixture
def png_b64() -> str:
    return PNG_B64
