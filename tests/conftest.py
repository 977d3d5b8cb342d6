"""
Shared test fixtures for the GitHub Arcade agent tests.

No test talks to Arcade or to a model provider: the Arcade clients are
MagicMock/AsyncMock stand-ins, and platform errors are real arcadepy
exception classes built over fake httpx responses.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import arcadepy  # noqa: E402


AUTH_URL = "https://cloud.arcade.dev/oauth/authorize?state=abc123"


@pytest.fixture
def create_issue_record():
    """The catalog record used in the end-to-end scenario."""
    return {
        "type": "function",
        "function": {
            "name": "create_issue",
            "description": "Create a GitHub issue",
            "parameters": {
                "type": "object",
                "properties": {"title": {"type": "string"}},
                "required": ["title"],
            },
        },
    }


def make_record(name, description="A tool", parameters=None):
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters if parameters is not None else {"type": "object", "properties": {}},
        },
    }


@pytest.fixture
def tool_client():
    """An AsyncArcade stand-in: tools.execute / tools.authorize are awaitable."""
    client = MagicMock()
    client.tools.execute = AsyncMock(return_value={"id": 42})
    client.tools.authorize = AsyncMock(return_value=SimpleNamespace(url=AUTH_URL, status="pending"))
    return client


@pytest.fixture
def catalog_client():
    """An Arcade stand-in whose catalog listing returns nothing by default."""
    client = MagicMock()
    client.tools.formatted.list.return_value = []
    return client


def permission_denied_error(message="permission denied"):
    request = httpx.Request("POST", "https://api.arcade.dev/v1/tools/execute")
    response = httpx.Response(403, request=request)
    return arcadepy.PermissionDeniedError(message, response=response, body=None)
