"""ASGI middleware applying per-route sliding window limits.

Rules are tried in registration order and the first pattern that matches
wins, regardless of how specific a later pattern is. Paths matching no rule
use the default options when given, otherwise they are not limited at all.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from starlette.types import ASGIApp, Receive, Scope, Send

from ratewindow.limiter.dispatch import handle_limiting
from ratewindow.limiter.matcher import normalize_path, path_matches
from ratewindow.limiter.tracker import WindowTracker
from ratewindow.models import RateLimiterOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteRule:
    pattern: str
    options: RateLimiterOptions
    tracker: WindowTracker


class EndpointRateLimitMiddleware:
    """ASGI middleware owning one ``WindowTracker`` per route pattern."""

    def __init__(
        self,
        app: ASGIApp,
        endpoint_limits: Mapping[str, RateLimiterOptions],
        default_options: RateLimiterOptions | None = None,
        *,
        max_keys: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.app = app
        self.rules: tuple[RouteRule, ...] = tuple(
            RouteRule(
                pattern=pattern,
                options=options,
                tracker=WindowTracker(
                    options.max_requests, options.window_size,
                    clock=clock, max_keys=max_keys,
                ),
            )
            for pattern, options in endpoint_limits.items()
        )
        self.default_options = default_options
        self.default_tracker: WindowTracker | None = None
        if default_options is not None:
            self.default_tracker = WindowTracker(
                default_options.max_requests, default_options.window_size,
                clock=clock, max_keys=max_keys,
            )
        logger.info(
            "Endpoint rate limits configured for %d pattern(s)%s",
            len(self.rules), " with default" if default_options else "",
        )

    def route(self, path: str) -> tuple[WindowTracker, RateLimiterOptions] | None:
        """Select the tracker and options governing ``path``."""
        path = normalize_path(path)
        for rule in self.rules:
            if path_matches(path, rule.pattern):
                logger.debug("Path %s matched rate limit pattern %s", path, rule.pattern)
                return rule.tracker, rule.options
        if self.default_tracker is not None and self.default_options is not None:
            return self.default_tracker, self.default_options
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        selected = self.route(scope["path"])
        if selected is None:
            await self.app(scope, receive, send)
            return

        tracker, options = selected
        await handle_limiting(tracker, options, self.app, scope, receive, send)
