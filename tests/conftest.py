"""Fixtures — fake upstream web, mocked HTTP client, test app."""

from __future__ import annotations

from collections.abc import Callable
from urllib.parse import urlsplit, urlunsplit

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.routes import _get_client, _get_settings, router
from src.config import Settings

Outcome = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


def normalize_url(url: str) -> str:
    """``http://example.com`` and ``http://example.com/`` name the same resource."""
    parts = urlsplit(url)
    return urlunsplit(parts._replace(path=parts.path or "/"))


class FakeUpstream:
    """Canned responses keyed by absolute URL.

    Values are ``httpx.Response`` objects, exceptions to raise, or callables
    that build a response from the request (for streamed bodies). Unknown
    URLs behave like unreachable hosts.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Outcome] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, outcome: Outcome) -> None:
        self.routes[normalize_url(url)] = outcome

    @property
    def urls(self) -> list[str]:
        return [normalize_url(str(r.url)) for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.routes.get(normalize_url(str(request.url)))
        if outcome is None:
            raise httpx.ConnectError("host unreachable", request=request)
        if isinstance(outcome, Exception):
            raise outcome
        if not isinstance(outcome, httpx.Response):
            return outcome(request)
        # Fresh copy per request; a response body can only be consumed once.
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def http_client(upstream: FakeUpstream):
    """AsyncClient whose transport is the fake upstream."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream), follow_redirects=True)
    yield client
    await client.aclose()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def app_client(upstream: FakeUpstream, settings: Settings) -> TestClient:
    """TestClient for the API router with outbound HTTP served by ``upstream``."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream), follow_redirects=True)

    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[_get_client] = lambda: client
    app.dependency_overrides[_get_settings] = lambda: settings
    return TestClient(app)
