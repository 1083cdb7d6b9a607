"""Route pattern matching with single-segment ``*`` wildcards."""

from __future__ import annotations

WILDCARD = "*"


def path_matches(path: str, pattern: str) -> bool:
    """Return True if ``path`` satisfies ``pattern`` segment by segment.

    Segment counts must be equal. A ``*`` pattern segment matches any one
    path segment, the empty segment after a trailing slash included; every
    other segment (``ab*`` included) must match literally.
    """
    pattern_segments = pattern.split("/")
    path_segments = path.split("/")

    if len(pattern_segments) != len(path_segments):
        return False

    for expected, actual in zip(pattern_segments, path_segments):
        if expected != WILDCARD and expected != actual:
            return False
    return True


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"
