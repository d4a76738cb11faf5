"""Analysis router for Script Sentinel API."""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from pydantic import BaseModel

from script_sentinel.api.dependencies import get_client, get_session, limiter
from script_sentinel.core.logging_config import get_logger
from script_sentinel.core.project_session import ProjectSession
from script_sentinel.pipelines.analysis_pipeline import validate_script

logger = get_logger("api.analysis")

router = APIRouter()


class AnalysisRequest(BaseModel):
    script: str
    with_visuals: bool = False


class AnalysisResponse(BaseModel):
    success: bool
    message: str


async def execute_analysis(session: ProjectSession, client, script: str, with_visuals: bool) -> None:
    """Background task body. Failures are recorded on the session, not raised."""
    outcome = await session.run_analysis(client, script, with_visuals)
    logger.info(f"Analysis {outcome.run_id} ended: {outcome.status.value}")


@router.post("", response_model=AnalysisResponse)
@limiter.limit("5/minute")
async def start_analysis(
    request: Request,
    analysis_request: AnalysisRequest,
    background_tasks: BackgroundTasks,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    """Start the staged analysis; poll /status for progress."""
    validate_script(analysis_request.script)
    background_tasks.add_task(
        execute_analysis,
        session,
        client,
        analysis_request.script,
        analysis_request.with_visuals,
    )
    return AnalysisResponse(success=True, message="Analysis started")


@router.get("/status")
async def get_status(session: ProjectSession = Depends(get_session)):
    return session.snapshot()


@router.get("/results")
async def get_results(session: ProjectSession = Depends(get_session)):
    project = session.current
    return {
        "status": session.status.value,
        "is_complete": project.is_analysis_complete,
        "stage1_result": project.stage1_result,
        "stage2_result": project.stage2_result,
        "stage3_result": project.stage3_result,
        "full_scenes": project.full_scenes,
    }


@router.post("/visuals")
@limiter.limit("2/minute")
async def regenerate_visuals(
    request: Request,
    session: ProjectSession = Depends(get_session),
    client=Depends(get_client),
):
    """Re-run the pitch-deck visual batch for the current project."""
    assets = await session.regenerate_visuals(client)
    return {
        "success": True,
        "failures": assets.failures,
        "stage2_result": session.current.stage2_result,
    }
