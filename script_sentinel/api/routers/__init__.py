"""API routers."""

from . import analysis, projects, studio

__all__ = ["analysis", "projects", "studio"]
