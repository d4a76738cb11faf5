"""Main FastAPI application for Script Sentinel."""

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from script_sentinel.core.env_loader import ensure_env_loaded
ensure_env_loaded()

from script_sentinel.api.dependencies import limiter
from script_sentinel.api.routers import analysis, projects, studio
from script_sentinel.core.config import get_config
from script_sentinel.core.constants import VERSION
from script_sentinel.core.exceptions import ErrorKind, SentinelError, extract_message_links, user_message
from script_sentinel.core.logging_config import get_logger

logger = get_logger("api")

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.MALFORMED_RESPONSE: 502,
    ErrorKind.UNAVAILABLE: 503,
}

app = FastAPI(
    title="Script Sentinel API",
    description="API for AI-powered script analysis and pre-production tooling",
    version=VERSION,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SentinelError)
async def sentinel_error_handler(request: Request, exc: SentinelError):
    """Render domain errors as {error, kind, links} with a status matching the error kind."""
    message = user_message(exc)
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "kind": exc.kind.value,
            "links": [{"url": link.url, "label": link.label} for link in extract_message_links(message)],
        },
    )


app.include_router(analysis.router, prefix="/api/analysis", tags=["analysis"])
app.include_router(studio.router, prefix="/api/studio", tags=["studio"])
app.include_router(projects.router, prefix="/api/projects", tags=["projects"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Script Sentinel API", "version": VERSION}


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def start_server(host: str = None, port: int = None, reload: bool = False):
    """Start the FastAPI server."""
    api_config = get_config().api
    uvicorn.run(
        "script_sentinel.api.main:app",
        host=host or api_config.host,
        port=port or api_config.port,
        reload=reload,
        log_level="warning",
    )


if __name__ == "__main__":
    start_server()
