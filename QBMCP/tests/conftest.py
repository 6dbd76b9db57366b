"""Shared fixtures for QBMCP tests."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from QBMCP.client import QuickBaseClient, QuickBaseConfig, RetryPolicy

BASE_URL = "https://api.quickbase.com/v1"


@pytest.fixture
def qb_config() -> QuickBaseConfig:
    return QuickBaseConfig(
        realm="example.quickbase.com",
        user_token="token123",
        app_id="bux123",
        timeout=30000,
        max_retries=2,
    )


@pytest.fixture
def no_wait_retry() -> RetryPolicy:
    """Retry policy without backoff sleeps."""
    return RetryPolicy(max_retries=2, retry_delay=0.0, backoff_factor=1.0, max_retry_delay=0.0)


class RecordingTransport:
    """httpx.MockTransport handler that records requests and replays queued responses."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: List[Any] = []

    def queue(self, status_code: int = 200, body: Any = None, exc: Exception = None) -> "RecordingTransport":
        self._responses.append(exc if exc is not None else (status_code, body))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status_code, body = item
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    def json_body(self, index: int) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_client(qb_config, no_wait_retry, transport) -> Callable[[], QuickBaseClient]:
    def _make() -> QuickBaseClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(transport), base_url=BASE_URL)
        return QuickBaseClient(qb_config, retry_policy=no_wait_retry, http_client=http)
    return _make
