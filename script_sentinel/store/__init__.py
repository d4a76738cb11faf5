"""Project persistence and import/export."""

from .project_store import InMemoryProjectStore, JsonFileProjectStore, ProjectStore
from .serialization import export_filename, export_project, import_project

__all__ = [
    "InMemoryProjectStore",
    "JsonFileProjectStore",
    "ProjectStore",
    "export_filename",
    "export_project",
    "import_project",
]
