"""
Visual Prompts

Prompt builders for pitch-deck imagery, shot blueprints, storyboards and the
image studio. The shot and storyboard prompts share the CineSight EnviroLock
protocol: environment and costume anchors are locked, camera placement is free.
"""

from typing import List, Optional

from script_sentinel.core.constants import UNSPECIFIED
from script_sentinel.models.analysis import CharacterProfile, Stage2Result
from script_sentinel.models.shots import CharacterDesign, SceneOverview, ShotIdea
from script_sentinel.models.studio import ImageStudioConfig, ShotStudioConfig

from . import schemas
from .analysis_prompts import PromptRequest

PROTOCOL_HEADER = "SYSTEM: CineSight–EnviroLock MAX (Unified Protocol, Camera Freedom Clarified)"

# =============================================================================
# PITCH DECK VISUALS
# =============================================================================


def concept_art_prompt(deck: Stage2Result) -> str:
    return f"""Create a cinematic, high-quality piece of concept art for a movie with the following details. This should look like a digital painting suitable for a pitch deck. Do not include any text, titles, or logos.
- Title: {deck.title}
- Genre: {deck.genre}
- Tone: {deck.tone}
- Logline: {deck.logline}
- Visual Style: {deck.visual_style_suggestion}
- Setting: {deck.world_and_setting}"""


def character_portrait_prompt(character: CharacterProfile, deck: Stage2Result) -> str:
    return f"""Create a cinematic character portrait of "{character.name}". This is for a movie pitch deck. The style should be realistic but painterly. The character should be the sole focus, with a simple, atmospheric background.
- Character Name: {character.name}
- Character Description: {character.description}
- Movie Genre: {deck.genre}
- Movie Tone: {deck.tone}
- Overall Visual Style: {deck.visual_style_suggestion}"""


def comparable_poster_prompt(title: str) -> str:
    return (
        f'A cinematic, high-quality movie poster for the film titled "{title}". '
        "The poster should be visually striking and representative of the film's genre and tone. "
        "Do not include any text like actor names, taglines, or release dates. Focus purely on the key artwork."
    )


def style_stills_prompt(visual_style: str) -> str:
    return (
        "Create three distinct cinematic film stills that perfectly capture the following visual style. "
        "Each image should look like a high-resolution screen grab from a movie, focusing on color palette, "
        "lighting, composition, and mood. Do not include any text or logos. "
        f'Visual Style: "{visual_style}"'
    )


# =============================================================================
# SHOT BLUEPRINTS
# =============================================================================

CINEMATOGRAPHER_SYSTEM_INSTRUCTION = """You are a professional Director of Photography and Cinematographer AI. Your task is to create a complete visual blueprint for a script scene.
**CRITICAL INSTRUCTIONS:**
1.  **MAINTAIN CONTINUITY:** You MUST first establish consistent scene-level descriptions for the setting and characters. These descriptions will serve as the single source of truth for all shots.
2.  **ADHERE TO SCRIPT:** You MUST NOT alter, add to, or contradict the narrative, actions, or dialogue in the script. Your suggestions are purely visual.
3.  **BE DETAILED:** Generate a professional shot list with detailed cinematic guidance for each shot.
4.  **FOLLOW SCHEMA:** Adhere strictly to the JSON schema.

**Process:**
1.  **Scene Overview:** Describe the scene's primary location and overarching lighting mood. This must remain consistent.
2.  **Character Designs:** For each character, provide a consistent physical and costume description for the entire scene.
3.  **Shot List:** Break down the scene into individual shots. For each shot, specify camera work, composition, blocking, etc. The 'art_design' and 'costume_and_makeup' for each shot MUST be consistent with the master descriptions you created in steps 1 and 2, only adding minor details specific to that shot's action (e.g., 'costume is now slightly disheveled')."""


def _is_set(value: Optional[str]) -> bool:
    return bool(value) and value != UNSPECIFIED


def build_shot_list_request(scene_text: str, config: ShotStudioConfig = None) -> PromptRequest:
    """Structured request for scene overview, character designs and shots."""
    config = config or ShotStudioConfig()
    prompt = (
        "Analyze the following script scene and generate a comprehensive visual blueprint, "
        "including a scene overview, character designs, and a shot list.\n"
    )
    if _is_set(config.genre):
        prompt += (
            f"\nThe scene should be shot in the style of the **{config.genre}** genre. All creative choices, "
            "especially lighting, art design, and composition, must reflect this.\n"
        )
    if _is_set(config.location):
        prompt += (
            f"\nThe scene is set in **{config.location}**. Ensure the art design, costumes, and overall "
            "environment feel authentic to this region.\n"
        )
    directives = []
    if _is_set(config.character_race):
        directives.append(f"Race: {config.character_race}")
    if _is_set(config.skin_tone):
        directives.append(f"Skin Tone: {config.skin_tone}")
    if directives:
        prompt += f"\nCharacter designs must adhere to these details: {', '.join(directives)}.\n"
    if _is_set(config.artistic_style):
        prompt += (
            f"\nThe overall artistic style for the entire scene must be **{config.artistic_style}**. "
            "All generated shots must adhere to this style. For the 'artistic_style' field in each shot, "
            f'you MUST use the exact string "{config.artistic_style}". Do not alter or vary it.\n'
        )
    prompt += f"\nSCRIPT SCENE:\n---\n{scene_text}\n---\n"
    return PromptRequest(prompt, CINEMATOGRAPHER_SYSTEM_INSTRUCTION, schemas.SHOT_LIST_SCHEMA)


def costume_anchor_log(character_designs: List[CharacterDesign]) -> str:
    """CAL lines, one per character."""
    if not character_designs:
        return "- No specific characters defined."
    return "\n".join(f"- {c.name}: {c.costume}" for c in character_designs)


def shot_image_prompt(
    shot: ShotIdea,
    scene_text: str,
    scene_overview: SceneOverview,
    character_designs: List[CharacterDesign],
) -> str:
    """Per-shot image prompt embedding the scene anchors verbatim."""
    return f"""
{PROTOCOL_HEADER}

Scene Focus: {scene_text}

CAL (Costume Anchor Log):
{costume_anchor_log(character_designs)}

Environment (Locked 360°):
- Description: {scene_overview.setting_description}
- Lighting & Time: {scene_overview.lighting_mood}
- Tags (Secret): Internal tags for locations, objects, camera anchors, character coordinates are active.

Environment Lockdown with Camera Freedom:
- The environment is locked in design, counts, and layout once generated.
- Camera freedom is unlimited: pan, tilt, dolly, crane, rotate, zoom, or cut to any angle.
- Each new shot must recompose the background logically (parallax, occlusion, horizon, depth of field, lighting direction).
- Important: Locking the environment does not restrict the camera. The two are independent.
- Character identity and costume must match the CAL exactly in every shot.
- Veto: If the camera angle changes but the background does not recompose, veto and regenerate.

Panel Outline:
- Panel {shot.shot_number} – [Shot Type: {shot.shot_type} | Camera Angle: {shot.composition_and_framing} | Subject Focus: {shot.description} | Lighting: {shot.lighting} | Style: {shot.artistic_style} | LOS–A (Framing): Follow shot type | LOS–B (Interaction Target): Based on action | Motion Status: {shot.blocking} | Anatomy Check: Enforced | Beat Purpose: To visually represent this moment in the script]

Rendering Protocol (Per Panel):
1. Continuity Check: Verify costumes, props, environment design, counts, and layout remain consistent with CAL and Environment logs.
2. Camera Freedom: Recompose via horizon, parallax, occlusion, lighting direction, DoF based on the shot type.
3. LOS–A (Framing): Enforce Wide/Close/OTS rules; maintain orientation persistence.
4. LOS–B (Interaction): Ensure gaze + posture are anatomically aligned to direct target; ensure species realism.
5. Motion Analysis: Adjust perspective and visible elements based on implied travel distance and direction from the Motion Status.
6. Anatomy Validation: Confirm species-specific anatomy and natural biomechanics.
7. Framing Enforcement: Ensure 16:9 aspect ratio.
8. Beat Validation: Panel must serve a narrative beat from the Scene Focus.
9. Frame Veto Protocol: If any rule fails → veto and regenerate until compliant.

Final Instruction: Generate a single 16:9 image for this specific panel outlined above. Adhere strictly to all protocols. Do not include any text, logos, or borders.
"""


# =============================================================================
# STORYBOARD GRID
# =============================================================================


def storyboard_grid_prompt(scene_description: str) -> str:
    """One image holding four sequential panels in a 2x2 grid."""
    return f"""
{PROTOCOL_HEADER}
PURPOSE: Generate a single, professional-grade storyboard image. This single image MUST be composed of four sequential panels arranged in a 2x2 grid.

Scene Focus: {scene_description}

CAL (Costume Anchor Log):
- You MUST establish consistent character designs and costumes based on the Scene Focus and maintain them across all four panels.

Environment (Locked 360°):
- You MUST establish a single, consistent environment based on the Scene Focus. The architecture, props, and overall layout are locked across all four panels.
- You MUST establish a single, consistent lighting scheme and time of day.

Environment Lockdown with Camera Freedom:
- The environment is locked in design, counts, and layout once generated.
- Camera freedom is unlimited for each panel: pan, tilt, dolly, crane, rotate, zoom, or cut to any angle.
- Each new panel (1->2, 2->3, 3->4) MUST recompose the background logically (parallax, occlusion, horizon, depth of field, lighting direction) to reflect a new camera position or angle.
- Veto: If the camera angle changes between panels but the background does not recompose, the entire image is a failure.

Panel Outline & Rendering Protocol (Applied to EACH panel in sequence):
- The four panels MUST represent a distinct, sequential narrative arc: 1. Setup (top-left), 2. Escalation (top-right), 3. Climax (bottom-left), 4. Resolution/Aftermath (bottom-right).
- Each panel MUST pass the full Rendering Protocol:
  1. Continuity Check: Costumes and environment MUST match the established logs.
  2. Camera Freedom: The background MUST be a logical recomposition from the previous panel's camera angle.
  3. LOS & Anatomy: Line-of-sight, posture, and anatomy must be logical and realistic for the action.
  4. Motion Analysis: If movement occurs between panels, the background shift must reflect it.
  5. Beat Validation: Each panel must serve its part in the 4-beat narrative arc.

Final Grid Generation Rules:
1. Single Image Output: You must generate only ONE image.
2. 2x2 Grid Layout: The single image must contain four panels arranged in a 2x2 grid with a thin border.
3. Panel Numbers: Include a small, clear number (1, 2, 3, 4) in the top-left corner of each respective panel.
4. No Text/Overlays: Other than the panel numbers, do not add text.

Final Instruction: Generate one single 16:9 image containing four distinct, sequential, and visually cohesive storyboard panels based on the Scene Focus and all rules above.
"""


# =============================================================================
# IMAGE STUDIO
# =============================================================================

CONTINUITY_ANALYSIS_PROMPT = """Analyze the visual characteristics of the primary subjects (people, objects, creatures) AND the environment in this image. Provide a detailed, concise description for:
1.  **Costume Anchor Log (CAL):** List each character and their exact costume.
2.  **Environment Log:** Describe the location, lighting, and key props.
Format the output exactly like this, using the headings:
CAL (Costume Anchor Log):
- [Character 1: Costume details]
Environment (Locked 360°):
- Description: [Location details]
- Lighting & Time: [Lighting details]"""


def studio_generate_prompt(user_prompt: str, config: ImageStudioConfig) -> str:
    """First panel of an image-studio sequence."""
    directives = []
    if _is_set(config.character_race):
        directives.append(f"Race: {config.character_race}")
    if _is_set(config.skin_tone):
        directives.append(f"Skin Tone: {config.skin_tone}")
    character_line = f"Adhere to these details: {', '.join(directives)}." if directives else ""
    location_line = f"The location is {config.location}." if config.location else ""
    shot_type = config.shot_type or "As appropriate"
    aspect = config.aspect_ratio or "16:9"
    return f"""
{PROTOCOL_HEADER}
Scene Focus: {user_prompt}
CAL (Costume Anchor Log):
- Establish character designs based on the Scene Focus. {character_line}
Environment (Locked 360°):
- Description: Establish an environment based on the Scene Focus. {location_line}
- Lighting & Time: Establish lighting based on the Scene Focus, Genre, and Artistic Style.
- Style: The overall artistic style MUST be {config.artistic_style or 'Cinematic Realism'}.
- Genre: The overall genre is {config.genre or 'Not specified'}.
Panel Outline:
- Panel 1 – [Shot Type: {shot_type} | Subject Focus: {user_prompt} | Beat Purpose: To establish the scene]
Rendering Protocol (Per Panel):
- Enforce realism, {aspect} aspect ratio, and adherence to style and genre.
Final Instruction: Generate a single {aspect} image for this panel. Adhere strictly to all protocols. Do not include any text, logos, or borders.
"""


def studio_continuation_prompt(user_prompt: str, continuity_log: str, config: ImageStudioConfig) -> str:
    """Next panel, re-creating the subjects and environment described by ``continuity_log``."""
    shot_type = config.shot_type or "As appropriate"
    aspect = config.aspect_ratio or "16:9"
    return f"""
{PROTOCOL_HEADER}
Scene Focus: {user_prompt}
{continuity_log}
Environment Lockdown with Camera Freedom:
- The environment is locked in design, counts, and layout once generated. Camera freedom is unlimited. Each new shot must recompose the background logically.
Panel Outline:
- Panel (New Scene) – [Shot Type: {shot_type} | Subject Focus: {user_prompt} | Beat Purpose: To continue the story from the previous image]
Rendering Protocol (Per Panel):
1. Continuity Check: Verify costumes, props, environment design consistent with CAL and Environment logs.
2. Camera Freedom: Recompose via horizon, parallax, occlusion, lighting direction, DoF based on the shot type.
3. Anatomy & Framing: Enforce realism and {aspect} aspect ratio.
Final Instruction: Generate a single {aspect} image for this new panel. CRITICAL: Subjects from the CAL and Environment logs MUST be perfectly recreated with 100% visual consistency. The action should follow the new 'Scene Focus'. Adhere strictly to all protocols. Do not include any text, logos, or borders.
"""


def reference_composition_prompt(user_prompt: str, has_character: bool, has_location: bool) -> str:
    """Instructions accompanying character and/or location reference images."""
    text = ""
    if has_character:
        text += "Use the character or object from the first image provided. Extract this subject and use its exact likeness. "
    if has_location:
        text += "Use the location from the next image provided as the background and setting for the scene. "
    if has_character and has_location:
        text += "Place the character/object into the location, ensuring they are logically blended. "
    text += f"Now, follow these instructions to complete the scene: {user_prompt}"
    return text
