"""Tests for rate-limit header crafting."""

from __future__ import annotations

from httpx import Headers
from starlette.responses import JSONResponse, PlainTextResponse, Response

from ratewindow.limiter.crafter import (
    craft_response,
    merge_headers,
    rate_limit_headers,
    set_raw_headers,
)


def _headers(response: Response) -> Headers:
    # Case-insensitive view over the raw header list
    return Headers(response.raw_headers)


def test_rate_limit_headers_with_remaining() -> None:
    assert rate_limit_headers(5, 42, remaining=3) == {
        "Retry-After": "42",
        "X-RateLimit-Limit": "5",
        "X-RateLimit-Remaining": "3",
        "X-RateLimit-Reset": "42",
    }


def test_remaining_defaults_to_zero() -> None:
    headers = rate_limit_headers(5, 60)
    assert headers["X-RateLimit-Remaining"] == "0"


def test_reset_mirrors_retry_after() -> None:
    headers = rate_limit_headers(1, 17, remaining=0)
    assert headers["Retry-After"] == headers["X-RateLimit-Reset"] == "17"


def test_craft_preserves_status_body_and_headers() -> None:
    response = PlainTextResponse("slow down", status_code=429, headers={"X-Trace": "abc"})
    crafted = craft_response(response, 2, 10)
    headers = _headers(crafted)
    assert crafted.status_code == 429
    assert crafted.body == b"slow down"
    assert headers["X-Trace"] == "abc"
    assert headers["X-RateLimit-Limit"] == "2"
    assert headers["X-RateLimit-Remaining"] == "0"
    assert headers["Retry-After"] == "10"


def test_craft_keeps_header_name_casing() -> None:
    crafted = craft_response(PlainTextResponse("ok"), 2, 10, remaining=1)
    names = [name for name, _ in crafted.raw_headers]
    assert b"Retry-After" in names
    assert b"X-RateLimit-Limit" in names
    assert b"X-RateLimit-Remaining" in names
    assert b"X-RateLimit-Reset" in names


def test_craft_overrides_existing_rate_limit_headers() -> None:
    response = JSONResponse({}, headers={"X-RateLimit-Limit": "999", "Retry-After": "1"})
    crafted = craft_response(response, 2, 10, remaining=1)
    headers = _headers(crafted)
    assert headers["Retry-After"] == "10"
    assert headers.get_list("X-RateLimit-Limit") == ["2"]
    assert (b"X-RateLimit-Limit", b"2") in crafted.raw_headers


def test_merge_headers_adds_and_overrides() -> None:
    response = PlainTextResponse("ok", headers={"Content-Language": "en", "X-Keep": "1"})
    merge_headers(response, {"Content-Language": "de", "X-Custom-Header": "Rate Limited"})
    headers = _headers(response)
    assert headers.get_list("Content-Language") == ["de"]
    assert headers["X-Custom-Header"] == "Rate Limited"
    assert headers["X-Keep"] == "1"


def test_set_raw_headers_replaces_case_insensitively() -> None:
    raw = [(b"x-ratelimit-limit", b"9"), (b"content-type", b"text/plain")]
    set_raw_headers(raw, {"X-RateLimit-Limit": "3"})
    assert raw == [(b"content-type", b"text/plain"), (b"X-RateLimit-Limit", b"3")]
