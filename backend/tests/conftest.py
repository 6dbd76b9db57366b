"""Pytest fixtures and configuration."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from QBMCP.client import QuickBaseClient
from QBMCP.orchestration import RelationshipOrchestrator
from QBMCP.policy import ToolAccessGuard, ToolPolicy
from backend.dependencies import get_dispatcher
from backend.main import app
from backend.tools import ToolContext, ToolDispatcher


@pytest.fixture
def qb_client():
    """QuickBaseClient double; every remote call is an AsyncMock."""
    return AsyncMock(spec=QuickBaseClient)


@pytest.fixture
def make_dispatcher(qb_client):
    """Build a dispatcher over the client double with a given policy."""
    def _make(policy: ToolPolicy = ToolPolicy()) -> ToolDispatcher:
        context = ToolContext(client=qb_client, orchestrator=RelationshipOrchestrator(qb_client))
        return ToolDispatcher(context, ToolAccessGuard(policy))
    return _make


@pytest.fixture
def dispatcher(make_dispatcher):
    return make_dispatcher()


@pytest.fixture
def client(dispatcher):
    """Test client for FastAPI app, wired to the dispatcher fixture."""
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def junction_args():
    return {
        "junctionTableName": "Orders_Products",
        "table1Id": "bqorders",
        "table2Id": "bqproducts",
        "table1FieldLabel": "Order",
        "table2FieldLabel": "Product",
        "additionalFields": [{"label": "Quantity", "fieldType": "numeric"}],
        "confirm": True,
    }
