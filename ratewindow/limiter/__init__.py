"""Sliding window limiter core.

- Window tracking per client key
- Route pattern matching
- Rate-limit header crafting
- Admit/reject dispatch
"""

from ratewindow.limiter.crafter import (
    LIMIT_HEADER,
    REMAINING_HEADER,
    RESET_HEADER,
    RETRY_AFTER,
    craft_response,
    merge_headers,
    set_raw_headers,
    rate_limit_headers,
)
from ratewindow.limiter.dispatch import (
    DEFAULT_REJECTION_BODY,
    ClientIdentityError,
    client_key,
    forwarded_for_extractor,
    handle_limiting,
)
from ratewindow.limiter.matcher import normalize_path, path_matches
from ratewindow.limiter.tracker import Decision, WindowTracker

__all__ = [
    # Headers
    "LIMIT_HEADER",
    "REMAINING_HEADER",
    "RESET_HEADER",
    "RETRY_AFTER",
    "craft_response",
    "merge_headers",
    "set_raw_headers",
    "rate_limit_headers",
    # Dispatch
    "DEFAULT_REJECTION_BODY",
    "ClientIdentityError",
    "client_key",
    "forwarded_for_extractor",
    "handle_limiting",
    # Matching
    "normalize_path",
    "path_matches",
    # Tracking
    "Decision",
    "WindowTracker",
]
