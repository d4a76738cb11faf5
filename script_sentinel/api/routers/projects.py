"""Projects router for Script Sentinel API."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from pydantic import BaseModel

from script_sentinel.api.dependencies import default_rate_limit, get_session, limiter
from script_sentinel.core.logging_config import get_logger
from script_sentinel.core.project_session import ProjectSession
from script_sentinel.models.project import Project
from script_sentinel.store.serialization import export_filename, export_project

logger = get_logger("api.projects")

router = APIRouter()


class ProjectSummary(BaseModel):
    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_complete: bool = False


class SaveRequest(BaseModel):
    name: Optional[str] = None


def _summary(project: Project) -> ProjectSummary:
    return ProjectSummary(
        id=project.id,
        name=project.name,
        created_at=project.created_at,
        updated_at=project.updated_at,
        is_complete=project.is_analysis_complete,
    )


def _file_response(project: Project) -> Response:
    filename = export_filename(project.name)
    return Response(
        content=export_project(project),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=List[ProjectSummary])
@limiter.limit(default_rate_limit)
async def list_projects(request: Request, session: ProjectSession = Depends(get_session)):
    """List saved projects, most recently updated first."""
    return [_summary(p) for p in session.store.list()]


@router.post("")
@limiter.limit(default_rate_limit)
async def save_current(request: Request, save_request: SaveRequest, session: ProjectSession = Depends(get_session)):
    """Save the current project; a name is required the first time."""
    project = session.save(save_request.name)
    return _summary(project)


@router.post("/new")
@limiter.limit(default_rate_limit)
async def new_project(request: Request, session: ProjectSession = Depends(get_session)):
    return session.new_project()


@router.get("/current")
@limiter.limit(default_rate_limit)
async def get_current(request: Request, session: ProjectSession = Depends(get_session)):
    return session.current


@router.put("/current")
@limiter.limit(default_rate_limit)
async def update_current(request: Request, fields: Dict[str, Any], session: ProjectSession = Depends(get_session)):
    """Update tool state (script, studio configs, storyboard requests) on the current project."""
    return session.update(**fields)


@router.get("/current/export")
@limiter.limit(default_rate_limit)
async def export_current(request: Request, session: ProjectSession = Depends(get_session)):
    return _file_response(session.current)


@router.post("/import")
@limiter.limit(default_rate_limit)
async def import_project_file(request: Request, session: ProjectSession = Depends(get_session)):
    """Import the raw contents of a .filmset file as a new, unsaved project."""
    data = await request.body()
    project = session.import_file(data)
    logger.info(f"Imported project '{project.name}'")
    return project


@router.get("/{project_id}")
@limiter.limit(default_rate_limit)
async def get_project(request: Request, project_id: str, session: ProjectSession = Depends(get_session)):
    return session.store.require(project_id)


@router.put("/{project_id}")
@limiter.limit(default_rate_limit)
async def update_project(request: Request, project_id: str, fields: Dict[str, Any], session: ProjectSession = Depends(get_session)):
    return session.update_saved(project_id, **fields)


@router.post("/{project_id}/load")
@limiter.limit(default_rate_limit)
async def load_project(request: Request, project_id: str, session: ProjectSession = Depends(get_session)):
    """Make a saved project the current one."""
    project = session.load(project_id)
    return {"project": project, "status": session.status.value}


@router.get("/{project_id}/export")
@limiter.limit(default_rate_limit)
async def export_saved(request: Request, project_id: str, session: ProjectSession = Depends(get_session)):
    return _file_response(session.store.require(project_id))


@router.delete("/{project_id}")
@limiter.limit(default_rate_limit)
async def delete_project(request: Request, project_id: str, session: ProjectSession = Depends(get_session)):
    session.delete(project_id)
    return {"success": True}
