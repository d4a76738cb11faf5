"""
Project Import / Export

Projects export to pretty-printed JSON (``.filmset`` files). Importing strips
the stored identity and timestamps, so the result is a new, unsaved project.
"""

import json
import re
from typing import Union

from pydantic import ValidationError as PydanticValidationError

from script_sentinel.core.constants import PROJECT_FILE_EXTENSION
from script_sentinel.core.exceptions import ProjectImportError
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.project import Project

logger = get_logger("store.serialization")

IDENTITY_FIELDS = ("id", "created_at", "updated_at")


def export_project(project: Project) -> str:
    """Serialize a project to JSON text."""
    return project.model_dump_json(indent=2)


def export_filename(name: str) -> str:
    """File name for an exported project: non-alphanumerics become underscores."""
    stem = re.sub(r"[^a-z0-9]", "_", (name or "").lower()) or "project"
    return f"{stem}{PROJECT_FILE_EXTENSION}"


def import_project(data: Union[str, bytes]) -> Project:
    """
    Parse an exported project.

    Raises:
        ProjectImportError: if the document is not JSON, lacks a string
            ``name`` and ``script``, or does not match the project model
    """
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProjectImportError(f"not valid JSON: {e}")

    if not isinstance(payload, dict):
        raise ProjectImportError("top-level value must be an object")
    if not isinstance(payload.get("name"), str) or not isinstance(payload.get("script"), str):
        raise ProjectImportError("'name' and 'script' must be strings")

    for key in IDENTITY_FIELDS:
        payload.pop(key, None)

    try:
        project = Project.model_validate(payload)
    except PydanticValidationError as e:
        raise ProjectImportError(f"{e.error_count()} field(s) failed validation")

    logger.info(f"Imported project '{project.name}'")
    return project
