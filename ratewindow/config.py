"""Loading endpoint rate limits from JSON config files."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from pathlib import Path

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ratewindow.models import (
    ClientIdentifierExtractor,
    LimitRuleConfig,
    LimitsConfig,
    RateLimiterOptions,
    RateLimitExceededHandler,
)

logger = logging.getLogger(__name__)


class RateLimitConfigError(ValueError):
    """Raised when a rate limit config file is missing or malformed."""


def _json_rejection(message: str) -> RateLimitExceededHandler:
    async def on_rate_limit_exceeded(request: Request) -> Response:
        return JSONResponse({"status": False, "message": message}, status_code=429)

    return on_rate_limit_exceeded


def options_from_rule(
    rule: LimitRuleConfig,
    extractor: ClientIdentifierExtractor | None = None,
) -> RateLimiterOptions:
    return RateLimiterOptions(
        max_requests=rule.max_requests,
        window_size=timedelta(seconds=rule.window_seconds),
        headers=dict(rule.headers),
        client_identifier_extractor=extractor,
        on_rate_limit_exceeded=_json_rejection(rule.message) if rule.message else None,
    )


def parse_limits_config(data: object) -> LimitsConfig:
    try:
        config = LimitsConfig.model_validate(data)
    except ValidationError as exc:
        raise RateLimitConfigError(f"Invalid rate limit config: {exc}") from exc

    seen: set[str] = set()
    for rule in config.endpoints:
        if rule.pattern in seen:
            raise RateLimitConfigError(f"Duplicate endpoint pattern: {rule.pattern}")
        seen.add(rule.pattern)
    return config


def load_limits_config(config_path: str) -> LimitsConfig:
    """Read and validate a limits config file."""
    path = Path(config_path)
    if not path.exists():
        raise RateLimitConfigError(f"Rate limit config file not found: {config_path}")
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise RateLimitConfigError(f"Rate limit config at {config_path} is invalid JSON") from exc
    return parse_limits_config(data)


def load_endpoint_limits(
    config_path: str,
    extractor: ClientIdentifierExtractor | None = None,
) -> tuple[dict[str, RateLimiterOptions], RateLimiterOptions | None]:
    """Load ``(endpoint_limits, default_options)`` in file order."""
    config = load_limits_config(config_path)
    endpoint_limits = {
        rule.pattern: options_from_rule(rule, extractor) for rule in config.endpoints
    }
    default = options_from_rule(config.default, extractor) if config.default else None
    logger.info(
        "Loaded %d endpoint rate limit(s) from %s", len(endpoint_limits), config_path,
    )
    return endpoint_limits, default
