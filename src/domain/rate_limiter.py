"""
Sliding-window rate limiter.

A soft, process-local throttle keyed by client identifier. It is not a
security boundary: state is lost on restart and concurrent requests for
the same key may under-count.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 15 * 60
DEFAULT_MAX_REQUESTS = 5


@dataclass
class _Window:
    timestamps: list[float]
    expires_at: float


@dataclass
class RateLimiterState:
    """
    Per-client request timestamps with TTL eviction.

    Each entry expires `ttl` seconds after it was last written; expired
    entries are dropped lazily on access and by evict_expired().
    """

    ttl: float
    _windows: dict[str, _Window] = field(default_factory=dict)

    def get(self, key: str, now: float) -> list[float]:
        window = self._windows.get(key)
        if window is None:
            return []
        if window.expires_at <= now:
            del self._windows[key]
            return []
        return list(window.timestamps)

    def put(self, key: str, timestamps: list[float], now: float) -> None:
        self._windows[key] = _Window(timestamps=timestamps, expires_at=now + self.ttl)

    def evict_expired(self, now: float) -> int:
        """Drop every expired entry, returning how many were removed."""
        expired = [key for key, window in self._windows.items() if window.expires_at <= now]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._windows)


@dataclass
class SlidingWindowRateLimiter:
    """
    Implements RateLimiter protocol.

    Allows at most `max_requests` calls per client within a trailing
    window of `window_seconds`. Denied calls are not recorded.
    """

    window_seconds: float = DEFAULT_WINDOW_SECONDS
    max_requests: int = DEFAULT_MAX_REQUESTS
    clock: Callable[[], float] = time.monotonic
    state: RateLimiterState | None = None
    _last_sweep: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.state is None:
            self.state = RateLimiterState(ttl=self.window_seconds)

    def allow(self, client_id: str) -> bool:
        now = self.clock()
        self._sweep(now)
        cutoff = now - self.window_seconds
        recent = [ts for ts in self.state.get(client_id, now) if ts > cutoff]

        if len(recent) >= self.max_requests:
            logger.warning("Rate limit exceeded for client %s", client_id)
            return False

        recent.append(now)
        self.state.put(client_id, recent, now)
        return True

    def _sweep(self, now: float) -> None:
        # Full eviction pass at most once per window
        if self._last_sweep is not None and now - self._last_sweep < self.window_seconds:
            return
        self._last_sweep = now
        evicted = self.state.evict_expired(now)
        if evicted:
            logger.debug("Evicted %d expired rate windows", evicted)
