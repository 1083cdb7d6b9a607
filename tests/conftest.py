"""Shared test fixtures for ratewindow."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route

from ratewindow.models import RateLimiterOptions


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_echo_app() -> Starlette:
    """Starlette app echoing the request path, with an extra app header."""

    async def echo(request: Request) -> PlainTextResponse:
        return PlainTextResponse(
            f"OK {request.url.path}", headers={"X-App-Header": "echo"},
        )

    return Starlette(routes=[Route("/{path:path}", echo)])


def make_options(**kwargs: Any) -> RateLimiterOptions:
    """Factory for RateLimiterOptions with sensible defaults."""
    defaults: dict[str, Any] = {
        "max_requests": 2,
        "window_size": 10,
    }
    defaults.update(kwargs)
    return RateLimiterOptions(**defaults)


def header_extractor(name: str = "x-client-id") -> Callable[[Request], str]:
    def extract(request: Request) -> str:
        return request.headers.get(name, "anonymous")

    return extract
