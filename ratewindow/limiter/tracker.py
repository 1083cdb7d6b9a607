"""In-memory sliding window request tracker, one timestamp deque per client key."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Verdict of a single ``WindowTracker.is_allowed`` call."""

    allowed: bool
    remaining: int
    reset_seconds: int


@dataclass
class _KeyWindow:
    timestamps: deque[float] = field(default_factory=deque)
    lock: threading.Lock = field(default_factory=threading.Lock)


class WindowTracker:
    """Sliding window counter per client key.

    A timestamp exactly ``window_size`` old is still counted. Rejected
    attempts do not consume a slot. Each key is serialized by its own lock;
    the tracker-level guard only covers lookup and lazy creation of keys.

    When ``max_keys`` is set, idle keys (no timestamp left inside the window)
    are evicted in least-recently-used order once the map grows past it; the
    scan stops at the first live key. Keys with live timestamps are never
    evicted.
    """

    def __init__(
        self,
        max_requests: int,
        window_size: timedelta,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int | None = None,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_size <= timedelta(0):
            raise ValueError("window_size must be a positive duration")
        if max_keys is not None and max_keys <= 0:
            raise ValueError("max_keys must be positive")
        self.max_requests = max_requests
        self.window_size = window_size
        self._window = window_size.total_seconds()
        self._window_seconds = int(self._window)
        self._clock = clock
        self._max_keys = max_keys
        self._windows: OrderedDict[str, _KeyWindow] = OrderedDict()
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._windows)

    def __contains__(self, client_key: object) -> bool:
        return client_key in self._windows

    def is_allowed(self, client_key: str) -> Decision:
        """Record a request for ``client_key`` if it fits in the window."""
        while True:
            entry = self._entry(client_key)
            with entry.lock:
                # Lost a race with idle-key eviction; fetch the live entry.
                if self._windows.get(client_key) is not entry:
                    continue
                now = self._clock()
                timestamps = entry.timestamps
                self._evict_expired(timestamps, now)

                if len(timestamps) >= self.max_requests:
                    return Decision(
                        allowed=False,
                        remaining=0,
                        reset_seconds=self._reset_seconds(timestamps, now),
                    )

                timestamps.append(now)
                return Decision(
                    allowed=True,
                    remaining=self.max_requests - len(timestamps),
                    reset_seconds=self._reset_seconds(timestamps, now),
                )

    def _entry(self, client_key: str) -> _KeyWindow:
        with self._guard:
            entry = self._windows.get(client_key)
            if entry is not None:
                self._windows.move_to_end(client_key)
                return entry
            if self._max_keys is not None and len(self._windows) >= self._max_keys:
                self._evict_idle_keys()
            return self._windows.setdefault(client_key, _KeyWindow())

    def _evict_idle_keys(self) -> None:
        # Called with the guard held. Oldest-used keys first; the scan stops
        # at the first key that is busy or still has live timestamps.
        now = self._clock()
        for key in list(self._windows):
            if len(self._windows) < self._max_keys:  # type: ignore[operator]
                break
            entry = self._windows[key]
            if not entry.lock.acquire(blocking=False):
                break
            try:
                self._evict_expired(entry.timestamps, now)
                if entry.timestamps:
                    break
                del self._windows[key]
                logger.debug("Evicted idle rate limit key %s", key)
            finally:
                entry.lock.release()

    def _evict_expired(self, timestamps: deque[float], now: float) -> None:
        while timestamps and now - timestamps[0] > self._window:
            timestamps.popleft()

    def _reset_seconds(self, timestamps: deque[float], now: float) -> int:
        return self._window_seconds - int(now - timestamps[0])
