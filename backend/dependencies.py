"""FastAPI dependencies - process-wide singletons."""

from functools import lru_cache

from QBMCP.client import QuickBaseClient
from QBMCP.orchestration import RelationshipOrchestrator
from QBMCP.policy import ToolAccessGuard
from backend.config import settings
from backend.tools import ToolContext, ToolDispatcher


@lru_cache(maxsize=1)
def get_quickbase_client() -> QuickBaseClient:
    """Singleton QuickBaseClient; fails with ConfigurationError without credentials."""
    return QuickBaseClient(settings.to_quickbase_config())


@lru_cache(maxsize=1)
def get_access_guard() -> ToolAccessGuard:
    """Singleton guard built from the QB_READONLY / QB_ALLOW_DESTRUCTIVE flags."""
    return ToolAccessGuard(settings.to_policy())


@lru_cache(maxsize=1)
def get_orchestrator() -> RelationshipOrchestrator:
    return RelationshipOrchestrator(get_quickbase_client())


@lru_cache(maxsize=1)
def get_dispatcher() -> ToolDispatcher:
    """Dispatcher wired to the singleton client, orchestrator and guard."""
    context = ToolContext(client=get_quickbase_client(), orchestrator=get_orchestrator())
    return ToolDispatcher(context, get_access_guard())
