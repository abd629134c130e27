"""Test fixtures for mediacloset tests."""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from mediacloset.models.album import AlbumMetadata

Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler) -> httpx.AsyncClient:
    """Create an AsyncClient whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class RecordingHandler:
    """HTTP handler that records requests and answers from a route table.

    Routes map a URL path to a response or a callable returning one.
    Unknown paths get a 404.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        return route

    @property
    def paths(self) -> list[str]:
        """Return the requested paths in order."""
        return [r.url.path for r in self.requests]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at zero."""
    return FakeClock()


@pytest.fixture
def album() -> AlbumMetadata:
    """Provide a sample album record."""
    return AlbumMetadata(
        source="discogs",
        artist="Pink Floyd",
        album="The Dark Side of the Moon",
        year=1973,
        label="Harvest",
        genres=("Rock", "Prog Rock"),
        cover_url="https://img.example/dsotm.jpg",
    )
