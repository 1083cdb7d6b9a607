"""Rate-limit response headers and response shaping."""

from __future__ import annotations

from collections.abc import Mapping

from starlette.responses import Response

RETRY_AFTER = "Retry-After"
LIMIT_HEADER = "X-RateLimit-Limit"
REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


def rate_limit_headers(
    max_requests: int,
    retry_after: int,
    remaining: int | None = None,
) -> dict[str, str]:
    """Build the four rate-limit headers.

    ``retry_after`` is emitted as both ``Retry-After`` and
    ``X-RateLimit-Reset``. Admitted responses carry the seconds until the
    oldest counted request leaves the window; rejections carry the full
    window length.
    """
    return {
        RETRY_AFTER: str(retry_after),
        LIMIT_HEADER: str(max_requests),
        REMAINING_HEADER: str(remaining) if remaining is not None else "0",
        RESET_HEADER: str(retry_after),
    }


def set_raw_headers(
    raw_headers: list[tuple[bytes, bytes]], headers: Mapping[str, str],
) -> None:
    """Replace ``headers`` in an ASGI raw header list, keeping name casing."""
    for name, value in headers.items():
        key = name.lower().encode("latin-1")
        raw_headers[:] = [item for item in raw_headers if item[0].lower() != key]
        raw_headers.append((name.encode("latin-1"), value.encode("latin-1")))


def merge_headers(response: Response, headers: Mapping[str, str]) -> Response:
    """Set ``headers`` on ``response``, overriding values with the same name."""
    set_raw_headers(response.raw_headers, headers)
    return response


def craft_response(
    response: Response,
    max_requests: int,
    retry_after: int,
    remaining: int | None = None,
) -> Response:
    """Layer the rate-limit headers on top of ``response``'s own headers."""
    return merge_headers(
        response, rate_limit_headers(max_requests, retry_after, remaining),
    )
