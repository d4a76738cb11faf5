"""
Project Store

Opaque persistence for project documents: create, get, list (most recently
updated first), update and delete. Two backends are provided: one JSON file
per project on disk, and an in-memory dictionary.
"""

import os
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from script_sentinel.core.exceptions import ProjectError, ProjectNotFoundError
from script_sentinel.core.logging_config import get_logger
from script_sentinel.models.project import Project, utc_now

logger = get_logger("store.projects")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _recency_key(project: Project) -> datetime:
    stamp = project.updated_at or project.created_at or _EPOCH
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


class ProjectStore(ABC):
    """Abstract project persistence."""

    @abstractmethod
    def create(self, project: Project) -> str:
        """Persist a new project and return its id."""

    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]:
        """Return the project or None."""

    @abstractmethod
    def list(self) -> List[Project]:
        """All projects, most recently updated first."""

    @abstractmethod
    def update(self, project: Project) -> None:
        """Overwrite an existing project. Raises ProjectNotFoundError."""

    @abstractmethod
    def delete(self, project_id: str) -> None:
        """Remove a project. Raises ProjectNotFoundError."""

    def require(self, project_id: str) -> Project:
        project = self.get(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    @staticmethod
    def _prepare_new(project: Project) -> Project:
        now = utc_now()
        return project.model_copy(update={
            "id": uuid.uuid4().hex,
            "created_at": project.created_at or now,
            "updated_at": project.updated_at or now,
        })


class InMemoryProjectStore(ProjectStore):
    """Dictionary-backed store, used for tests and ephemeral sessions."""

    def __init__(self):
        self._projects: Dict[str, Project] = {}

    def create(self, project: Project) -> str:
        stored = self._prepare_new(project)
        self._projects[stored.id] = stored.model_copy(deep=True)
        return stored.id

    def get(self, project_id: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    def list(self) -> List[Project]:
        projects = [p.model_copy(deep=True) for p in self._projects.values()]
        return sorted(projects, key=_recency_key, reverse=True)

    def update(self, project: Project) -> None:
        if not project.id or project.id not in self._projects:
            raise ProjectNotFoundError(project.id or "")
        self._projects[project.id] = project.model_copy(deep=True)

    def delete(self, project_id: str) -> None:
        if project_id not in self._projects:
            raise ProjectNotFoundError(project_id)
        del self._projects[project_id]


class JsonFileProjectStore(ProjectStore):
    """One ``<id>.json`` document per project in a directory."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, project_id: str) -> Path:
        if not project_id or not project_id.isalnum():
            raise ProjectNotFoundError(project_id or "")
        return self.root / f"{project_id}.json"

    def _write(self, project: Project) -> None:
        path = self._path(project.id)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(project.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, path)

    def _read(self, path: Path) -> Optional[Project]:
        try:
            return Project.model_validate_json(path.read_text(encoding="utf-8"))
        except PydanticValidationError as e:
            logger.warning(f"Skipping unreadable project file {path.name}: {e.error_count()} error(s)")
            return None
        except OSError as e:
            raise ProjectError(f"Failed to read project file: {e}", {"path": str(path)})

    def create(self, project: Project) -> str:
        stored = self._prepare_new(project)
        self._write(stored)
        logger.info(f"Created project '{stored.name}' ({stored.id})")
        return stored.id

    def get(self, project_id: str) -> Optional[Project]:
        try:
            path = self._path(project_id)
        except ProjectNotFoundError:
            return None
        if not path.exists():
            return None
        return self._read(path)

    def list(self) -> List[Project]:
        projects = []
        for path in self.root.glob("*.json"):
            project = self._read(path)
            if project is not None:
                projects.append(project)
        return sorted(projects, key=_recency_key, reverse=True)

    def update(self, project: Project) -> None:
        if not project.id or not self._path(project.id).exists():
            raise ProjectNotFoundError(project.id or "")
        self._write(project)
        logger.debug(f"Updated project {project.id}")

    def delete(self, project_id: str) -> None:
        path = self._path(project_id)
        if not path.exists():
            raise ProjectNotFoundError(project_id)
        path.unlink()
        logger.info(f"Deleted project {project_id}")
