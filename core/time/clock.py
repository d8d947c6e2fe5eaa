"""
VOD Core Time — Explicit Clock Protocol
=========================================
Order logic never calls datetime.now() directly.
Completion time is passed in explicitly; services that need
wall-clock time (payment confirmation, refund-window checks)
receive a Clock.

Every instant that enters the refund window goes through to_utc(),
so naive datetimes are refused at the boundary instead of failing
later in a comparison.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


def to_utc(dt: datetime, owner: str = "datetime") -> datetime:
    """Normalize an aware datetime to UTC. Naive datetimes are refused."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"{owner} requires timezone-aware datetime.")
    return dt.astimezone(timezone.utc)


# ══════════════════════════════════════════════════════════════
# CLOCK PROTOCOL
# ══════════════════════════════════════════════════════════════

class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        """Return current UTC time."""
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# IMPLEMENTATIONS
# ══════════════════════════════════════════════════════════════

class SystemClock:
    """Production clock: real system time."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Test clock: returns a fixed timestamp until advanced.

    Usage:
        clock = FixedClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        clock.advance(days=15)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        self._fixed_dt = to_utc(fixed_dt, "FixedClock")

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, seconds: float = 0, days: float = 0) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(days=days, seconds=seconds)


# ══════════════════════════════════════════════════════════════
# DEFAULT CLOCK
# ══════════════════════════════════════════════════════════════

_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Override the default clock (testing only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    return _default_clock


def now_utc() -> datetime:
    """Convenience: current UTC time from the default clock."""
    return _default_clock.now_utc()
