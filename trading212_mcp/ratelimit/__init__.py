"""Rate limiting module - downstream rate-limit snapshots."""

from .snapshot import (
    RATE_LIMIT_HEADERS,
    RateLimitSnapshot,
    RateLimitStore,
    extract_snapshot,
)


__all__ = [
    "RATE_LIMIT_HEADERS",
    "RateLimitSnapshot",
    "RateLimitStore",
    "extract_snapshot",
]
