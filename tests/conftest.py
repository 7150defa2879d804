# Test configuration
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import httpx
import pytest
import structlog

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from trading212_mcp.broker import Trading212Client  # noqa: E402
from trading212_mcp.registry import build_catalog  # noqa: E402

API_KEY = "test-key"
DEMO_BASE = "https://demo.trading212.com/api/v0"

RATE_HEADERS = {
    "x-ratelimit-limit": "60",
    "x-ratelimit-period": "60",
    "x-ratelimit-remaining": "59",
    "x-ratelimit-reset": "1700000000",
    "x-ratelimit-used": "1",
}

ORDER_JSON = {
    "createdOn": "2024-01-02T10:00:00Z",
    "filledQuantity": 0,
    "filledValue": 0,
    "id": 123,
    "quantity": 10,
    "side": "BUY",
    "status": "NEW",
    "ticker": "AAPL",
    "timeValidity": "DAY",
    "type": "MARKET",
}

ACCOUNT_CASH_JSON = {
    "free": 1000.5,
    "total": 2500.0,
    "ppl": 12.3,
    "result": 4.5,
    "invested": 1500.0,
    "pieCash": 0,
    "blocked": 0,
}


def make_response(
    status_code: int = 200,
    json_body=None,
    text: str | None = None,
    headers: dict | None = None,
) -> httpx.Response:
    """Build a real httpx.Response for the mocked transport."""
    if json_body is not None:
        content = json.dumps(json_body).encode()
    elif text is not None:
        content = text.encode()
    else:
        content = b""
    return httpx.Response(status_code, content=content, headers=headers or {})


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging so later tests never write to a closed capture stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def http_client():
    """AsyncMock standing in for httpx.AsyncClient."""
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.request.return_value = make_response(200, json_body={})
    return mock


@pytest.fixture
def broker(http_client):
    return Trading212Client(api_key=API_KEY, http_client=http_client)


@pytest.fixture(scope="session")
def catalog():
    return build_catalog()
