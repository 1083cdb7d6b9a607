"""Admit/reject dispatch shared by the global and endpoint limiters."""

from __future__ import annotations

import inspect
import logging

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ratewindow.limiter.crafter import (
    craft_response,
    merge_headers,
    rate_limit_headers,
    set_raw_headers,
)
from ratewindow.limiter.tracker import WindowTracker
from ratewindow.models import RateLimiterOptions

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_BODY = "Too many requests, please try again later."
DEFAULT_REJECTION_STATUS = 429


class ClientIdentityError(RuntimeError):
    """Raised when no client key can be derived for a request."""


def client_key(request: Request, options: RateLimiterOptions) -> str:
    """Derive the rate-limit key: custom extractor, else the remote address."""
    if options.client_identifier_extractor is not None:
        return options.client_identifier_extractor(request)
    if request.client is None or not request.client.host:
        raise ClientIdentityError(
            "No client address on the connection and no "
            "client_identifier_extractor configured",
        )
    return request.client.host


def forwarded_for_extractor(request: Request) -> str:
    """Key on the first ``X-Forwarded-For`` address, else the remote address.

    Only safe behind a proxy that overwrites the header.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is None or not request.client.host:
        raise ClientIdentityError("No X-Forwarded-For header and no client address")
    return request.client.host


async def rejection_response(request: Request, options: RateLimiterOptions) -> Response:
    """Build the 429 response: custom callback result or the plain-text default."""
    if options.on_rate_limit_exceeded is None:
        response: Response = PlainTextResponse(
            DEFAULT_REJECTION_BODY, status_code=DEFAULT_REJECTION_STATUS,
        )
    else:
        result = options.on_rate_limit_exceeded(request)
        response = await result if inspect.isawaitable(result) else result
    merge_headers(response, options.headers)
    return craft_response(response, options.max_requests, options.window_seconds)


async def handle_limiting(
    tracker: WindowTracker,
    options: RateLimiterOptions,
    app: ASGIApp,
    scope: Scope,
    receive: Receive,
    send: Send,
) -> None:
    request = Request(scope, receive)
    key = client_key(request, options)
    decision = tracker.is_allowed(key)

    if not decision.allowed:
        logger.warning(
            "Rate limit exceeded for %s on %s (limit %d per %ss)",
            key, request.url.path, options.max_requests, options.window_seconds,
        )
        response = await rejection_response(request, options)
        await response(scope, receive, send)
        return

    headers = rate_limit_headers(
        options.max_requests, decision.reset_seconds, decision.remaining,
    )

    async def send_with_headers(message: Message) -> None:
        if message["type"] == "http.response.start":
            raw_headers = list(message.get("headers", []))
            set_raw_headers(raw_headers, headers)
            message["headers"] = raw_headers
        await send(message)

    await app(scope, receive, send_with_headers)
