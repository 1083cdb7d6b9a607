"""FastAPI echo application with rate limiting installed."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from ratewindow.config import load_endpoint_limits
from ratewindow.limiter.dispatch import forwarded_for_extractor
from ratewindow.middleware.endpoint_limiter import EndpointRateLimitMiddleware
from ratewindow.middleware.global_limiter import RateLimitMiddleware
from ratewindow.models import RateLimiterOptions


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    max_keys_env = os.environ.get("RATE_LIMIT_MAX_KEYS")
    max_keys = int(max_keys_env) if max_keys_env else None
    extractor = (
        forwarded_for_extractor
        if os.environ.get("RATE_LIMIT_TRUST_FORWARDED") == "1"
        else None
    )

    config_path = os.environ.get("RATE_LIMIT_CONFIG_PATH")
    if config_path:
        endpoint_limits, default_options = load_endpoint_limits(config_path, extractor)
        return create_app(
            endpoint_limits=endpoint_limits,
            default_options=default_options,
            max_keys=max_keys,
        )

    options = RateLimiterOptions(
        max_requests=int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "60")),
        window_size=timedelta(seconds=float(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", "60"))),
        client_identifier_extractor=extractor,
    )
    return create_app(options=options, max_keys=max_keys)


def create_app(
    options: RateLimiterOptions | None = None,
    endpoint_limits: Mapping[str, RateLimiterOptions] | None = None,
    default_options: RateLimiterOptions | None = None,
    max_keys: int | None = None,
) -> FastAPI:
    """Create an echo app behind either the global or the endpoint limiter."""
    if options is None and endpoint_limits is None and default_options is None:
        raise ValueError("Provide options or endpoint_limits/default_options")
    if options is not None and (endpoint_limits or default_options):
        raise ValueError("Global options and endpoint limits are mutually exclusive")

    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
    async def echo(request: Request, path: str) -> PlainTextResponse:
        return PlainTextResponse(f"Request received for /{path}")

    if options is not None:
        app.add_middleware(RateLimitMiddleware, options=options, max_keys=max_keys)
    else:
        app.add_middleware(
            EndpointRateLimitMiddleware,
            endpoint_limits=endpoint_limits or {},
            default_options=default_options,
            max_keys=max_keys,
        )

    return app
