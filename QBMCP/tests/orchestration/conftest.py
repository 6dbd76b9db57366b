"""Fixtures for orchestration tests: a QuickBaseClient double built on AsyncMock."""

from unittest.mock import AsyncMock

import pytest

from QBMCP.client import QuickBaseClient


@pytest.fixture
def qb_client():
    return AsyncMock(spec=QuickBaseClient)
