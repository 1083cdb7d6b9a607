"""ASGI middleware applying one sliding window limit to all HTTP traffic."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from starlette.types import ASGIApp, Receive, Scope, Send

from ratewindow.limiter.dispatch import handle_limiting
from ratewindow.limiter.tracker import WindowTracker
from ratewindow.models import RateLimiterOptions

logger = logging.getLogger(__name__)


class RateLimitMiddleware:
    """ASGI middleware sharing a single ``WindowTracker`` across every request.

    Pass a ready ``RateLimiterOptions`` or its fields as keyword arguments::

        app.add_middleware(RateLimitMiddleware, max_requests=5, window_size=60)
    """

    def __init__(
        self,
        app: ASGIApp,
        options: RateLimiterOptions | None = None,
        *,
        max_keys: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        **option_fields: Any,
    ) -> None:
        if options is None:
            options = RateLimiterOptions(**option_fields)
        elif option_fields:
            raise TypeError("Pass either options or option fields, not both")
        self.app = app
        self.options = options
        self.tracker = WindowTracker(
            options.max_requests, options.window_size, clock=clock, max_keys=max_keys,
        )
        logger.info(
            "Global rate limit: %d requests per %ss",
            options.max_requests, options.window_seconds,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        await handle_limiting(self.tracker, self.options, self.app, scope, receive, send)
