"""Downstream rate-limit telemetry with thread-safe in-memory storage."""

import threading
from typing import Mapping, NamedTuple


RATE_LIMIT_HEADERS = (
    "x-ratelimit-limit",
    "x-ratelimit-period",
    "x-ratelimit-remaining",
    "x-ratelimit-reset",
    "x-ratelimit-used",
)


class RateLimitSnapshot(NamedTuple):
    """Throttling counters last reported by Trading 212 for one endpoint.

    Attributes:
        limit: Requests allowed per window.
        period: Window length in seconds.
        remaining: Requests left in the current window.
        reset: Unix timestamp when the window resets.
        used: Requests already consumed in the window.
    """

    limit: int
    period: int
    remaining: int
    reset: int
    used: int


def extract_snapshot(headers: Mapping[str, str]) -> RateLimitSnapshot | None:
    """Read the five ``x-ratelimit-*`` headers.

    Args:
        headers: Response headers (case-insensitive mapping such as ``httpx.Headers``).

    Returns:
        The snapshot, or None unless all five headers are present and numeric.
    """
    values = [headers.get(name) for name in RATE_LIMIT_HEADERS]
    if not all(values):
        return None
    try:
        limit, period, remaining, reset, used = (int(value) for value in values)
    except ValueError:
        return None
    return RateLimitSnapshot(limit=limit, period=period, remaining=remaining, reset=reset, used=used)


class RateLimitStore:
    """Last-writer-wins snapshot map keyed by endpoint path.

    Shared by every session: the limits belong to the single downstream
    identity, so all dispatch contexts read and write the same store.
    """

    def __init__(self) -> None:
        self._snapshots: dict[str, RateLimitSnapshot] = {}
        self._lock = threading.Lock()

    def get(self, endpoint: str) -> RateLimitSnapshot | None:
        with self._lock:
            return self._snapshots.get(endpoint)

    def set(self, endpoint: str, snapshot: RateLimitSnapshot) -> None:
        with self._lock:
            self._snapshots[endpoint] = snapshot

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)
