"""Script generator: turns a story idea into a formatted short scene."""

from script_sentinel.core.config import SentinelConfig, get_config
from script_sentinel.core.exceptions import ValidationError
from script_sentinel.core.logging_config import get_logger
from script_sentinel.prompts.analysis_prompts import build_script_generator_request

logger = get_logger("studio.script_writer")


def validate_idea(idea: str) -> str:
    if not idea or not idea.strip():
        raise ValidationError("Please enter an idea for your script.")
    return idea


async def generate_script_from_idea(client, idea: str, config: SentinelConfig = None) -> str:
    """Write a 1-3 page scene from ``idea`` in standard screenplay format."""
    validate_idea(idea)
    config = config or get_config()
    request = build_script_generator_request(idea.strip())
    script = await client.generate_text(
        request.prompt,
        system_instruction=request.system_instruction,
        temperature=config.models.script_generator_temperature,
    )
    logger.info(f"Generated script scene ({len(script)} chars)")
    return script
