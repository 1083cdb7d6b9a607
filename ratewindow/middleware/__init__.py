"""ASGI rate limiting middleware."""

from ratewindow.middleware.endpoint_limiter import EndpointRateLimitMiddleware, RouteRule
from ratewindow.middleware.global_limiter import RateLimitMiddleware

__all__ = [
    "EndpointRateLimitMiddleware",
    "RateLimitMiddleware",
    "RouteRule",
]
