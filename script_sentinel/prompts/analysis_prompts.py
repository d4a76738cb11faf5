"""
Analysis Prompts

Instruction text for the three analysis stages, scene extraction and the
script generator. Builders are pure: they only format their arguments.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import schemas


@dataclass(frozen=True)
class PromptRequest:
    """Everything needed for one text-model call."""
    prompt: str
    system_instruction: Optional[str] = None
    schema: Optional[Dict[str, Any]] = None


ANALYST_SYSTEM_INSTRUCTION = (
    "You are the Script Sentinel, a professional script reader and pre-production AI for studios. "
    "Your purpose is to ingest a full movie script OR a brief concept and produce a complete professional "
    "breakdown across multiple stages. You must analyze ONLY the provided text. Do NOT expand, invent, add to, "
    "or alter story details. If information required for a field is not present in the text, you must state "
    "that it is underdeveloped or make a reasonable inference based ONLY on the provided text. "
    "Adhere strictly to the requested JSON schema."
)

SCREENWRITER_SYSTEM_INSTRUCTION = """You are a creative and professional screenwriter. Your task is to take a user's story idea and generate a short, compelling script scene (approximately 1-3 pages). The script must be formatted using standard industry conventions:
- Scene headings (INT./EXT. LOCATION - DAY/NIGHT) are in all caps.
- Character names are centered and in all caps before their dialogue.
- Dialogue is indented beneath the character name.
- Parentheticals are in parentheses and indented.
- Action lines (scene description) are written in the present tense.
- Do not include page numbers, "CONTINUED", or any other production notes. Focus purely on the content of the scene.
- The output must be only the formatted script text, with no extra explanations, titles, or commentary."""


def _content_block(script: str) -> str:
    return f"CONTENT TO ANALYZE:\n---\n{script}\n---"


def build_stage1_request(script: str) -> PromptRequest:
    """Stage 1: structural and narrative deconstruction."""
    prompt = f"""Analyze the following movie script or story concept for Stage 1: Structural & Narrative Deconstruction. Analyze ONLY the provided text. Do NOT expand, invent, or add new story elements.

- Estimate the page count if it's a concept, or use the actual count if it's a formatted script.
- Provide a structural breakdown into three acts based on the provided text. If the text is too brief for a full breakdown, provide a high-level summary for each act based on the potential structure.
- List all characters mentioned in the text, identifying each as either 'on-screen' or 'off-screen'.
- Generate a concise logline.
- Write TWO synopses based ONLY on the provided text: 1) A brief summary. 2) An extended synopsis.
- Perform an integrity check. For a concept, identify areas that are underdeveloped. For a script, flag narrative deviations or plot holes.

{_content_block(script)}
"""
    return PromptRequest(prompt, ANALYST_SYSTEM_INSTRUCTION, schemas.STAGE1_SCHEMA)


def build_stage2_request(script: str, logline: str, extended_synopsis: str) -> PromptRequest:
    """Stage 2: pitch deck, grounded on the Stage 1 logline and extended synopsis."""
    prompt = f"""Based on the following movie script or story concept, and using the provided logline and synopsis for context, perform Stage 2: Pitch Deck Creation. Analyze ONLY the provided text. Do NOT expand, invent, or add new story elements. If information is not present in the text, state that it needs to be developed.

- Infer Title, Author, Genre, and Tone from the text. If not present, suggest plausible options based on the content. Set Author to 'N/A' if not provided.
- Describe the World & Setting as depicted in the text.
- Create Character Profiles (arcs, motivations) based ONLY on what is written.
- Write a Treatment based on the plot provided.
- Identify Themes & Motifs present in the text.
- Suggest 3-5 comparable titles.
- Define the likely Target Audience.
- Suggest a Visual Style based on the content.
- Provide a final Rating of the script/concept with justification.
- Output a completion_checklist of all generated categories.

CONTEXT:
Logline: {logline}
Synopsis: {extended_synopsis}

{_content_block(script)}
"""
    return PromptRequest(prompt, ANALYST_SYSTEM_INSTRUCTION, schemas.STAGE2_SCHEMA)


def build_stage3_request(script: str) -> PromptRequest:
    """Stage 3: production breakdown and scheduling suggestions."""
    prompt = f"""Based on the following movie script or story concept, perform Stage 3: Production Breakdown & Scheduling Suggestions. Analyze ONLY the provided text. Do NOT expand, invent, or add new story elements. All production details should be directly inferred from the text. If details are not available, make reasonable, high-level estimates and note them as such.

1.  **Scene Breakdown:** List all scenes mentioned or implied in the text.
2.  **Character Breakdown:** List all characters and their likely role types.
3.  **Location Breakdown:** List all locations mentioned.
4.  **Props, Wardrobe, Special Requirements:** Extract any mentioned production elements.
5.  **Scheduling Suggestions:** Based on the complexity described, provide high-level scheduling suggestions and estimate shooting days.
6.  **Departmental Notes:** Write brief notes for key departments based on the text.
7.  **Risk Assessment:** Identify potential production challenges based on what's described.

{_content_block(script)}
"""
    return PromptRequest(prompt, ANALYST_SYSTEM_INSTRUCTION, schemas.STAGE3_SCHEMA)


def build_scene_extraction_request(script: str) -> PromptRequest:
    """Split a script into its scenes, verbatim."""
    prompt = f"""Split the following movie script into its individual scenes. A scene begins at a scene heading (INT./EXT. LOCATION - TIME) and runs until the next heading. Copy the text of each scene exactly as written, without summarizing, rewording, or omitting any lines. If the text is a concept without scene headings, return each distinct story moment as a scene with a short descriptive heading.

{_content_block(script)}
"""
    return PromptRequest(prompt, ANALYST_SYSTEM_INSTRUCTION, schemas.SCENE_EXTRACTION_SCHEMA)


def build_script_generator_request(idea: str) -> PromptRequest:
    """Free-text scene written from a story idea."""
    prompt = f"""Based on the following idea, write a short script scene.

IDEA:
---
{idea}
---
"""
    return PromptRequest(prompt, SCREENWRITER_SYSTEM_INSTRUCTION)
