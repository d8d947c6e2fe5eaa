"""
VOD Core Time — Public API
============================
Explicit clock protocol and temporal helpers.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
    now_utc,
    set_default_clock,
    to_utc,
)
from core.time.temporal import (
    expires_at,
    is_expired,
    seconds_until_expiry,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "set_default_clock",
    "now_utc",
    "to_utc",
    "expires_at",
    "is_expired",
    "seconds_until_expiry",
]
