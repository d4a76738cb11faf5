"""
Visual Generation Batch Runner

Generates the pitch-deck imagery for a Stage 2 result: concept art, up to two
character portraits, up to three comparable-title posters and a set of style
stills. Requests are issued strictly one after another to stay under provider
rate limits. A single failed image is logged and left out; a rate-limit
failure aborts the remaining requests and propagates.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from script_sentinel.core.constants import (
    CONCEPT_ART_ASPECT_RATIO,
    MAX_CHARACTER_PORTRAITS,
    MAX_COMPARABLE_POSTERS,
    PORTRAIT_ASPECT_RATIO,
    POSTER_ASPECT_RATIO,
    STYLE_STILL_ASPECT_RATIO,
    STYLE_STILL_COUNT,
    ScreenPresence,
)
from script_sentinel.core.exceptions import is_rate_limit_error
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.analysis import ComparableTitleVisual, Stage2Result
from script_sentinel.prompts import visual_prompts

logger = get_logger("pipelines.visual_batch")


class VisualKind(Enum):
    CONCEPT_ART = "concept_art"
    PORTRAIT = "portrait"
    POSTER = "poster"
    STYLE_STILLS = "style_stills"


@dataclass(frozen=True)
class VisualRequest:
    """One planned image request."""
    kind: VisualKind
    label: str
    prompt: str
    aspect_ratio: str
    count: int = 1


@dataclass
class VisualAssets:
    """Generated assets. Every collection is independent and may be empty."""
    concept_art_base64: Optional[str] = None
    character_portraits: Dict[str, str] = field(default_factory=dict)
    comparable_titles_visuals: List[ComparableTitleVisual] = field(default_factory=list)
    visual_style_images_base64: List[str] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.concept_art_base64
            or self.character_portraits
            or self.comparable_titles_visuals
            or self.visual_style_images_base64
        )


def plan_visual_requests(deck: Stage2Result) -> List[VisualRequest]:
    """The ordered list of image requests for a pitch deck."""
    plan = [
        VisualRequest(
            VisualKind.CONCEPT_ART,
            "concept art",
            visual_prompts.concept_art_prompt(deck),
            CONCEPT_ART_ASPECT_RATIO,
        )
    ]

    on_screen = [
        p for p in deck.character_profiles if p.screen_presence == ScreenPresence.ON_SCREEN
    ][:MAX_CHARACTER_PORTRAITS]
    for character in on_screen:
        plan.append(VisualRequest(
            VisualKind.PORTRAIT,
            character.name,
            visual_prompts.character_portrait_prompt(character, deck),
            PORTRAIT_ASPECT_RATIO,
        ))

    for title in deck.comparable_titles[:MAX_COMPARABLE_POSTERS]:
        plan.append(VisualRequest(
            VisualKind.POSTER,
            title,
            visual_prompts.comparable_poster_prompt(title),
            POSTER_ASPECT_RATIO,
        ))

    plan.append(VisualRequest(
        VisualKind.STYLE_STILLS,
        "style stills",
        visual_prompts.style_stills_prompt(deck.visual_style_suggestion),
        STYLE_STILL_ASPECT_RATIO,
        count=STYLE_STILL_COUNT,
    ))
    return plan


class VisualBatchRunner:
    """Runs a visual plan sequentially against a Gemini client."""

    def __init__(self, client, progress_callback: Callable[[Dict], None] = None):
        self.client = client
        self._progress_callback = progress_callback

    async def run(self, deck: Stage2Result) -> VisualAssets:
        plan = plan_visual_requests(deck)
        assets = VisualAssets()
        logger.info(f"Generating {len(plan)} visual request(s) for '{deck.title}'")

        for index, request in enumerate(plan):
            if self._progress_callback:
                self._progress_callback({
                    'step': request.kind.value,
                    'label': request.label,
                    'current': index + 1,
                    'total': len(plan),
                })
            try:
                images = await self.client.generate_images(
                    request.prompt,
                    number_of_images=request.count,
                    aspect_ratio=request.aspect_ratio,
                )
            except Exception as e:
                if is_rate_limit_error(e):
                    logger.error(f"Rate limit hit on {request.label}; aborting visual batch")
                    raise
                logger.warning(f"Failed to generate {request.kind.value} for {request.label}: {e}")
                assets.failures.append(request.label)
                continue

            if not images:
                logger.warning(f"No image returned for {request.label}")
                assets.failures.append(request.label)
                continue
            self._collect(assets, request, images)

        logger.info(
            f"Visual batch finished: {len(plan) - len(assets.failures)}/{len(plan)} request(s) produced output"
        )
        return assets

    @staticmethod
    def _collect(assets: VisualAssets, request: VisualRequest, images: List[str]) -> None:
        if request.kind == VisualKind.CONCEPT_ART:
            assets.concept_art_base64 = images[0]
        elif request.kind == VisualKind.PORTRAIT:
            assets.character_portraits[request.label] = images[0]
        elif request.kind == VisualKind.POSTER:
            assets.comparable_titles_visuals.append(
                ComparableTitleVisual(title=request.label, image_base64=images[0])
            )
        else:
            assets.visual_style_images_base64.extend(images)


def merge_visuals(deck: Stage2Result, assets: VisualAssets) -> Stage2Result:
    """
    Attach generated assets to a pitch deck.

    Portraits are matched by character name; the other collections replace
    the deck's existing ones only when they are non-empty, so a category that
    produced nothing keeps whatever the deck already had.
    """
    update = {}
    if assets.concept_art_base64:
        update["concept_art_base64"] = assets.concept_art_base64
    if assets.character_portraits:
        update["character_profiles"] = [
            profile.model_copy(update={"image_base64": assets.character_portraits[profile.name]})
            if profile.name in assets.character_portraits else profile
            for profile in deck.character_profiles
        ]
    if assets.comparable_titles_visuals:
        update["comparable_titles_visuals"] = list(assets.comparable_titles_visuals)
    if assets.visual_style_images_base64:
        update["visual_style_images_base64"] = list(assets.visual_style_images_base64)
    return deck.model_copy(update=update)
