"""Shared API state: rate limiter, the project session and the Gemini client."""

from typing import Optional

from slowapi import Limiter
from slowapi.util import get_remote_address

from script_sentinel.core.config import get_config
from script_sentinel.core.project_session import ProjectSession
from script_sentinel.llm.api_clients import GeminiClient
from script_sentinel.store.project_store import JsonFileProjectStore

limiter = Limiter(key_func=get_remote_address)


def default_rate_limit() -> str:
    """Per-client limit for routes that do not call the model."""
    return get_config().api.rate_limit


_session: Optional[ProjectSession] = None
_client: Optional[GeminiClient] = None


def get_session() -> ProjectSession:
    """The process-wide project session, backed by the JSON file store."""
    global _session
    if _session is None:
        config = get_config()
        store = JsonFileProjectStore(config.store.projects_dir)
        _session = ProjectSession(store, config, autosave=True)
    return _session


def get_client() -> GeminiClient:
    """Lazily created so the API can start (and serve projects) without a key."""
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client
