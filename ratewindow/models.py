"""Shared Pydantic data models for ratewindow."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.requests import Request
from starlette.responses import Response

ClientIdentifierExtractor = Callable[[Request], str]
RateLimitExceededHandler = Callable[[Request], Awaitable[Response] | Response]


# --- Limiter Options ---


class RateLimiterOptions(BaseModel):
    """Configuration bundle for one limiter rule.

    ``window_size`` accepts a ``timedelta`` or a number of seconds.
    ``headers`` are layered onto rejected responses before the
    rate-limit headers, so the latter win on a name collision.
    """

    model_config = ConfigDict(frozen=True)

    max_requests: int = Field(gt=0)
    window_size: timedelta
    client_identifier_extractor: ClientIdentifierExtractor | None = None
    on_rate_limit_exceeded: RateLimitExceededHandler | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("window_size")
    @classmethod
    def _positive_window(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("window_size must be a positive duration")
        return value

    @property
    def window_seconds(self) -> int:
        """Window length in whole seconds (truncated)."""
        return int(self.window_size.total_seconds())


# --- Config File Models ---


class LimitRuleConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_requests: int = Field(gt=0)
    window_seconds: float = Field(gt=0)
    headers: dict[str, str] = Field(default_factory=dict)
    message: str | None = None  # JSON 429 body when set


class EndpointRuleConfig(LimitRuleConfig):
    pattern: str = Field(min_length=1)


class LimitsConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    default: LimitRuleConfig | None = None
    endpoints: list[EndpointRuleConfig] = Field(default_factory=list)
