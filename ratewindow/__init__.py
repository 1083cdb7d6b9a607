"""Sliding window rate limiting middleware for Starlette and FastAPI.

- Global limiter sharing one window across all traffic
- Endpoint limiter with exact and ``*`` wildcard route patterns
- Standard ``Retry-After`` / ``X-RateLimit-*`` response headers
"""

from ratewindow.limiter import (
    ClientIdentityError,
    Decision,
    WindowTracker,
    forwarded_for_extractor,
    path_matches,
)
from ratewindow.middleware import EndpointRateLimitMiddleware, RateLimitMiddleware
from ratewindow.models import RateLimiterOptions

__all__ = [
    "ClientIdentityError",
    "Decision",
    "EndpointRateLimitMiddleware",
    "RateLimitMiddleware",
    "RateLimiterOptions",
    "WindowTracker",
    "forwarded_for_extractor",
    "path_matches",
]
