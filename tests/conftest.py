"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable

import httpx
import pytest

from github_badges.config import Config

ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_USERNAME",
    "GITHUB_API_URL",
    "GITHUB_GRAPHQL_URL",
    "GITHUB_JOINING_YEAR",
    "GITHUB_ALL_COMMITS",
    "BADGES_CACHE_TTL",
    "BADGES_THEME",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment and .env file out of every test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("github_badges.config.load_dotenv", lambda **kwargs: False)
    yield


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return Config(
        github_token="test_token",
        github_username="octocat",
        github_api_url="https://api.github.com",
        github_graphql_url="https://api.github.com/graphql",
    )


def json_response(data: Any, status_code: int = 200, headers: dict | None = None) -> httpx.Response:
    """Build an httpx response with a JSON body."""
    return httpx.Response(
        status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json", **(headers or {})},
    )


@pytest.fixture
def mock_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.MockTransport]:
    """Wrap a request handler into an httpx transport, recording every request."""

    def factory(handler):
        requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(record)
        transport.requests = requests
        return transport

    return factory
