"""
Response Schemas

Structural descriptors passed as ``response_schema`` on structured Gemini
calls. Every property used downstream is listed under ``required`` so that a
missing field surfaces as a validation failure rather than a silent gap.
"""

from typing import Any, Dict, List

from script_sentinel.core.constants import Department, RoleType, ScreenPresence, TimeOfDay

Schema = Dict[str, Any]


def _string(description: str = None, enum: List[str] = None) -> Schema:
    schema: Schema = {"type": "STRING"}
    if description:
        schema["description"] = description
    if enum:
        schema["enum"] = enum
    return schema


def _integer(description: str = None) -> Schema:
    schema: Schema = {"type": "INTEGER"}
    if description:
        schema["description"] = description
    return schema


def _number(description: str = None) -> Schema:
    schema: Schema = {"type": "NUMBER"}
    if description:
        schema["description"] = description
    return schema


def _boolean() -> Schema:
    return {"type": "BOOLEAN"}


def _array(items: Schema, description: str = None) -> Schema:
    schema: Schema = {"type": "ARRAY", "items": items}
    if description:
        schema["description"] = description
    return schema


def _object(properties: Dict[str, Schema], description: str = None) -> Schema:
    """Object schema with every property required."""
    schema: Schema = {
        "type": "OBJECT",
        "properties": properties,
        "required": list(properties.keys()),
    }
    if description:
        schema["description"] = description
    return schema


SCREEN_PRESENCE_VALUES = [p.value for p in ScreenPresence]
TIME_OF_DAY_VALUES = [t.value for t in TimeOfDay]
ROLE_TYPE_VALUES = [r.value for r in RoleType]
DEPARTMENT_VALUES = [d.value for d in Department]

_SCREEN_PRESENCE = _string(
    "Indicates if the character is 'on-screen' (will be seen) or 'off-screen' (e.g., voice-over only).",
    SCREEN_PRESENCE_VALUES,
)

# =============================================================================
# STAGE 1
# =============================================================================

STAGE1_SCHEMA = _object({
    "page_count": _integer("The total page count of the script. If it's a concept, estimate it."),
    "logline": _string("A one-sentence summary of the story."),
    "acts": _array(
        _object({
            "act_number": _integer(),
            "title": _string("e.g., Act I: The Setup"),
            "scene_breakdown": _array(_object({
                "scene_number": _integer(),
                "setting": _string("e.g., INT. COFFEE SHOP - DAY"),
                "summary": _string("A brief summary of the scene's events."),
            })),
        }),
        "Breakdown of the story into three acts.",
    ),
    "characters": _array(
        _object({
            "name": _string(),
            "description": _string("A brief description of the character."),
            "screen_presence": _SCREEN_PRESENCE,
        }),
        "A comprehensive list of all characters, including those with dialogue and those only mentioned in descriptions.",
    ),
    "synopsis": _object(
        {
            "brief": _string("An intelligently and intriguingly summarized 3-paragraph synopsis."),
            "extended": _string("A full, progressive synopsis that tells the complete story from beginning to end."),
        },
        "Both a brief and an extended synopsis of the story.",
    ),
    "integrity_check": _object({
        "issues_found": _boolean(),
        "details": _string(
            "Details on any narrative deviations or potential plot holes. "
            "If it's a concept, identify areas that need further development."
        ),
    }),
})

# =============================================================================
# STAGE 2
# =============================================================================

STAGE2_SCHEMA = _object({
    "title": _string("A suitable title for the story."),
    "author": _string("The author of the script, or 'Concept Expansion' if it's an idea."),
    "genre": _string(),
    "tone": _string(),
    "logline": _string(),
    "world_and_setting": _string("A description of the world and primary settings."),
    "character_profiles": _array(_object({
        "name": _string(),
        "description": _string(),
        "screen_presence": _SCREEN_PRESENCE,
        "arc": _string("The character's developmental arc."),
        "motivation": _string("The character's primary motivation."),
    })),
    "treatment": _string("A 1-2 page plot treatment."),
    "themes_and_motifs": _array(
        _object({
            "theme": _string(),
            "prominence": _number(
                "A score from 1 (minor) to 10 (central) indicating the theme's importance and recurrence."
            ),
        }),
        "A list of identified themes and motifs, each with a prominence score.",
    ),
    "comparable_titles": _array(_string(), "3-5 comparable film or TV titles."),
    "target_audience": _string(),
    "visual_style_suggestion": _string("Suggestions for cinematography and visual style."),
    "final_rating": _object({
        "score": _number("A rating on a 10-point scale for its potential as a concept."),
        "justification": _string("Justification for the given score."),
    }),
    "completion_checklist": _array(
        _string(),
        "A checklist of all the categories successfully generated for the pitch deck.",
    ),
})

# =============================================================================
# STAGE 3
# =============================================================================

_PRODUCTION_ELEMENT = _object({
    "name": _string(),
    "description": _string(),
    "department": _string(enum=DEPARTMENT_VALUES),
})

STAGE3_SCHEMA = _object({
    "scene_breakdown": _array(_object({
        "scene_number": _integer(),
        "page_number": _string(),
        "location": _string(),
        "time_of_day": _string(enum=TIME_OF_DAY_VALUES),
        "estimated_length_eighths": _number("Estimated script length in eighths of a page."),
        "summary": _string(),
    })),
    "character_breakdown": _array(_object({
        "name": _string(),
        "role_type": _string(enum=ROLE_TYPE_VALUES),
        "scene_appearances": _array(_integer()),
    })),
    "location_breakdown": _array(_object({
        "location": _string(),
        "scenes": _array(_integer()),
        "is_unique": _boolean(),
    })),
    "props_and_set_dressing": _array(_PRODUCTION_ELEMENT),
    "wardrobe_and_makeup": _array(_PRODUCTION_ELEMENT),
    "special_requirements": _array(_PRODUCTION_ELEMENT),
    "scheduling_suggestions": _object({
        "total_shooting_days": _integer("The total estimated number of shooting days."),
        "shooting_schedule": _array(
            _object({
                "day": _integer(),
                "scenes": _string("Comma-separated list of scene numbers to be shot."),
                "location": _string("Primary location for the day's shoot."),
                "notes": _string("Key notes for the day, e.g., actors involved, special requirements."),
            }),
            "A detailed day-by-day shooting schedule.",
        ),
        "scene_grouping_suggestions": _array(_string()),
        "cast_scheduling_highlights": _array(_string()),
        "day_night_balance": _string(),
        "complexity_flags": _array(_string()),
    }),
    "departmental_notes": _array(_object({
        "department": _string(enum=DEPARTMENT_VALUES),
        "notes": _string(),
    })),
    "risk_assessment": _array(_string()),
})

# =============================================================================
# SCENE EXTRACTION
# =============================================================================

SCENE_EXTRACTION_SCHEMA = _object({
    "scenes": _array(_object({
        "scene_number": _integer("Sequential number of the scene, starting at 1."),
        "heading": _string("The scene heading exactly as written, e.g., INT. COFFEE SHOP - DAY."),
        "content": _string("The complete, verbatim text of the scene including the heading."),
    })),
})

# =============================================================================
# SHOT LIST
# =============================================================================

SHOT_IDEA_SCHEMA = _object({
    "shot_number": _integer("The sequential number of the shot in the scene."),
    "shot_type": _string("The type of shot (e.g., 'Establishing Shot', 'Medium Close-Up', 'Point of View')."),
    "artistic_style": _string(
        "The specific artistic style for this shot (e.g., 'Semi-realistic', 'Stylized realism', 'Dynamic cartoonish')."
    ),
    "description": _string("A detailed description of the action and focus within the shot."),
    "composition_and_framing": _string(
        "Notes on composition rules (e.g., rule of thirds), camera angle, and how characters/objects are framed."
    ),
    "lighting": _string(
        "Description of the lighting style (e.g., 'High-key', 'Low-key with hard shadows', 'Naturalistic')."
    ),
    "blocking": _string("Description of character movement and camera movement within the shot."),
    "costume_and_makeup": _string(
        "Key details about costumes and makeup visible in the shot, consistent with the master character designs."
    ),
    "art_design": _string(
        "Key details about the set dressing, props, and overall environment, consistent with the master scene overview."
    ),
})

SHOT_LIST_SCHEMA = _object({
    "scene_overview": _object(
        {
            "setting_description": _string(
                "A detailed, consistent description of the primary location/setting for the entire scene. "
                "This description will be used as the baseline for all shots."
            ),
            "lighting_mood": _string(
                "The consistent, overarching lighting style and mood for the scene "
                "(e.g., 'Warm, soft, late afternoon sun', 'Cold, sterile, fluorescent lighting')."
            ),
        },
        "A high-level overview of the scene's visual elements to ensure consistency across all shots.",
    ),
    "character_designs": _array(
        _object({
            "name": _string("Character's name as it appears in the script."),
            "description": _string("A brief physical description of the character (age, build, key features)."),
            "costume": _string("A detailed description of the character's complete costume for this scene."),
        }),
        "Consistent design descriptions for the main characters appearing in the scene. "
        "These designs must be maintained across all shots.",
    ),
    "shots": _array(SHOT_IDEA_SCHEMA),
})


def required_fields(schema: Schema) -> List[str]:
    """Top-level required property names of an object schema."""
    return list(schema.get("required", []))
